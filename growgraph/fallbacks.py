# Static payloads served when the AI service is unavailable or its output can't be parsed.
import copy

FALLBACK_CAREER_PATHS: dict[str, list[str]] = {
    "Software Development": [
        "Frontend Developer",
        "Backend Developer",
        "Full Stack Developer",
        "Mobile Developer",
        "DevOps Engineer",
    ],
    "Data Science": [
        "Data Analyst",
        "Machine Learning Engineer",
        "Data Engineer",
        "Business Intelligence Analyst",
        "Research Scientist",
    ],
    "Design": [
        "UI/UX Designer",
        "Graphic Designer",
        "Product Designer",
        "Motion Designer",
        "Interaction Designer",
    ],
    "Business": [
        "Product Manager",
        "Project Manager",
        "Business Analyst",
        "Marketing Manager",
        "Sales Manager",
    ],
}

FALLBACK_CAREER_DETAILS: dict[str, dict] = {
    "Software Developer": {
        "title": "Software Developer",
        "averageSalary": "$50K-80K entry, $80K-150K+ senior",
        "requirements": {
            "education": ["Bachelor's degree in Computer Science or related field"],
            "certifications": ["AWS Certified Developer", "Microsoft Certified: Azure Developer Associate"],
            "experience": ["2+ years of software development experience", "Experience with modern frameworks"],
        },
        "description": "Software developers design, code, and maintain software applications and systems.",
        "relatedCompanies": ["Google", "Microsoft", "Amazon", "Apple", "Meta"],
        "roleModels": ["Linus Torvalds", "Guido van Rossum", "James Gosling"],
    }
}

# (keywords, suggestions) checked in order against the lowercased node text
_KEYWORD_SUGGESTIONS: list[tuple[tuple[str, ...], list[str]]] = [
    (("developer", "engineer"), [
        "Senior Software Engineer",
        "Technical Lead",
        "Full Stack Developer",
        "DevOps Engineer",
        "Software Architect",
        "Backend Developer",
        "Frontend Developer",
        "Mobile App Developer",
    ]),
    (("designer", "ux", "ui"), [
        "Senior UX Designer",
        "Product Designer",
        "UI/UX Researcher",
        "Visual Designer",
        "Interaction Designer",
        "Design System Manager",
        "Creative Director",
        "Brand Designer",
    ]),
    (("manager", "management"), [
        "Senior Product Manager",
        "Project Manager",
        "Program Manager",
        "Team Lead",
        "Operations Manager",
        "Strategy Manager",
        "Business Development Manager",
        "Marketing Manager",
    ]),
    (("data", "analyst"), [
        "Senior Data Scientist",
        "Data Engineer",
        "Business Intelligence Analyst",
        "Machine Learning Engineer",
        "Data Analyst",
        "Research Scientist",
        "AI Engineer",
        "Analytics Manager",
    ]),
]

_GENERIC_SUGGESTION_TEMPLATES = [
    "Senior {0}",
    "{0} Lead",
    "{0} Manager",
    "{0} Specialist",
    "{0} Consultant",
    "{0} Director",
    "{0} Expert",
    "Principal {0}",
]

FALLBACK_CATEGORIES = ["Software Development", "Data Science", "Design", "Business"]
_CATEGORY_POSITIONS = [(-200, 100), (200, 100), (-200, -100), (200, -100)]


def career_specific_suggestions(node_content) -> list[str]:
    node_content = "" if node_content is None else str(node_content)
    content = node_content.lower()
    for keywords, suggestions in _KEYWORD_SUGGESTIONS:
        if any(k in content for k in keywords):
            return list(suggestions)
    return [t.format(node_content) for t in _GENERIC_SUGGESTION_TEMPLATES]


def fallback_mindmap(aim=None) -> dict:
    nodes = [{"id": "1", "data": {"label": aim or "Career Exploration"}, "position": {"x": 0, "y": 0}}]
    edges = []
    for i, (category, (x, y)) in enumerate(zip(FALLBACK_CATEGORIES, _CATEGORY_POSITIONS), start=2):
        nodes.append({"id": str(i), "data": {"label": category}, "position": {"x": x, "y": y}})
        edges.append({"id": f"e1-{i}", "source": "1", "target": str(i)})
    return {"nodes": nodes, "edges": edges}


def center_only_mindmap(job_path=None, aim=None) -> dict:
    return {
        "nodes": [
            {
                "id": "root",
                "data": {"label": job_path or aim or "Career Center"},
                "position": {"x": 0, "y": 0},
            }
        ],
        "edges": [],
    }


def fallback_career_details(career_title) -> dict:
    if isinstance(career_title, str) and career_title in FALLBACK_CAREER_DETAILS:
        return copy.deepcopy(FALLBACK_CAREER_DETAILS[career_title])
    return {
        "title": career_title,
        "averageSalary": "$50K-80K entry, $80K-150K+ senior",
        "requirements": {
            "education": ["Bachelor's degree preferred"],
            "certifications": ["Industry-standard certifications"],
            "experience": ["2+ years relevant experience"],
        },
        "description": f"{career_title} professionals solve problems using specialized skills and knowledge.",
        "relatedCompanies": ["Google", "Microsoft", "Apple", "Amazon", "Meta"],
        "roleModels": ["Industry leaders", "Successful practitioners"],
    }


def fallback_career_paths(career_title) -> list[str]:
    if isinstance(career_title, str) and career_title in FALLBACK_CAREER_PATHS:
        return list(FALLBACK_CAREER_PATHS[career_title])
    return [f"Senior {career_title}", f"Lead {career_title}", f"Principal {career_title}"]
