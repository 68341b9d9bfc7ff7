MINDMAP_SYSTEM_PROMPT = "You generate career mind maps in JSON format with specific job titles."

MINDMAP_PROMPT = """Create a career mind map for someone with:
- Career Goal: {aim}
- Job Path: {job_path}
- Interests: {hobby}
- MBTI: {mbti} (prefer {mbti_guidance})
- Target Salary: {salary}
- Role Model: {role_model}

Generate 6-8 specific job titles IN KOREAN with time estimates that match their goals and MBTI preferences.

Return JSON format:
{
  "nodes": [
    { "id": "1", "data": { "label": "[Main Career Goal in Korean]" }, "position": { "x": 0, "y": 0 } },
    { "id": "2", "data": { "label": "[Korean Job Title] (경력 X년)" }, "position": { "x": -200, "y": -150 } }
    // ... 5-7 more job nodes around the center
  ],
  "edges": [
    { "id": "e1-2", "source": "1", "target": "2" }
    // ... edges connecting center to each job
  ]
}

IMPORTANT:
- All job titles must be in Korean with proper nouns (company names, people names, technologies) in English
- Add time estimate in parentheses: "(신입)", "(경력 2-3년)", "(경력 5년+)", "(경력 10년+)"
- Examples: "시니어 Product Manager (경력 5년+)", "UX 리서처 (경력 2-3년)", "Google 소프트웨어 엔지니어 (경력 3년+)"
- Use specific Korean job titles with English proper nouns where appropriate"""


SUGGESTIONS_SYSTEM_PROMPT = "You expand career terms into specific job titles. Return JSON arrays only."

SUGGESTIONS_PROMPT = """Expand "{node_content}" into 8-12 specific related job titles or career paths IN KOREAN with time estimates.

Return only a JSON array of Korean strings with English proper nouns and time estimates.

Format: ["Korean Job Title (경력 X년)", "Another Korean Job Title (신입)", ...]

Example: ["시니어 Software Engineer (경력 5년+)", "Google Product Manager (경력 3-5년)", "스타트업 CTO (경력 10년+)"]

IMPORTANT: Keep company names, technologies, and proper nouns in English within Korean job titles."""


CAREER_DETAILS_SYSTEM_PROMPT = "You provide concise career information in JSON format."

CAREER_DETAILS_PROMPT = """Career info for "{career_title}" in JSON with Korean content:

{
  "title": "{career_title}",
  "averageSalary": "한국 기준 연봉 (신입: X만원, 경력: X만원, 시니어: X만원)",
  "requirements": {
    "education": ["한국어로 학력 요구사항"],
    "certifications": ["한국어로 자격증/기술 요구사항 (영어 기술명 유지)"],
    "experience": ["한국어로 경력 요구사항"]
  },
  "description": "한국어로 직무 설명",
  "relatedCompanies": ["Major companies hiring this role"],
  "roleModels": ["Notable professionals with Korean description"],
  "timeToReach": {
    "신입": "경력 0년",
    "주니어": "경력 1-3년",
    "시니어": "경력 5-7년",
    "리드": "경력 8년+"
  }
}

IMPORTANT:
- Provide all content in Korean except company names, people names, and technology names
- Add realistic time estimates for career progression
- Include Korean salary information
- Keep proper nouns (Apple, Google, React, Python, etc.) in English"""


EXPAND_CAREER_SYSTEM_PROMPT = "You are a helpful assistant that generates career paths in JSON format."

EXPAND_CAREER_PROMPT = """Given the career "{career_title}", generate {scope} in this field.
Format the response as a JSON array of strings, where each string is a career path or role.
Return ONLY the JSON array, no other text."""

EXPAND_SCOPE_MAIN = "main career paths"
EXPAND_SCOPE_SPECIFIC = "specific roles and specializations"


MBTI_GUIDANCE = {
    "INTJ": "strategic, analytical roles",
    "INFJ": "meaningful, people-focused roles",
    "ENFP": "creative, collaborative roles",
    "ENTP": "innovative, entrepreneurial roles",
    "ISTJ": "structured, reliable roles",
    "ISFJ": "supportive, service-oriented roles",
    "ISTP": "hands-on, technical roles",
    "ISFP": "creative, flexible roles",
    "INFP": "values-driven, expressive roles",
    "INTP": "research, analytical roles",
    "ESTP": "dynamic, action-oriented roles",
    "ESFP": "social, energetic roles",
    "ESTJ": "leadership, management roles",
    "ESFJ": "collaborative, caring roles",
    "ENFJ": "mentoring, inspiring roles",
    "ENTJ": "leadership, strategic roles",
}


def simple_mbti_guidance(mbti) -> str:
    if not isinstance(mbti, str):
        return "diverse career options"
    return MBTI_GUIDANCE.get(mbti.strip().upper(), "diverse career options")
