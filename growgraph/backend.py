# growgraph/backend.py

import json
import logging

from langchain_core.messages import HumanMessage, SystemMessage

from growgraph.fallbacks import (
    career_specific_suggestions,
    center_only_mindmap,
    fallback_career_details,
    fallback_career_paths,
    fallback_mindmap,
)
from growgraph.prompts import (
    CAREER_DETAILS_PROMPT,
    CAREER_DETAILS_SYSTEM_PROMPT,
    EXPAND_CAREER_PROMPT,
    EXPAND_CAREER_SYSTEM_PROMPT,
    EXPAND_SCOPE_MAIN,
    EXPAND_SCOPE_SPECIFIC,
    MINDMAP_PROMPT,
    MINDMAP_SYSTEM_PROMPT,
    SUGGESTIONS_PROMPT,
    SUGGESTIONS_SYSTEM_PROMPT,
    simple_mbti_guidance,
)
from growgraph.utils import JsonParseError, Utils

logger = logging.getLogger("growgraph")


class MindMapBackend(Utils):
    """
    Route logic for the GrowGraph API. Every AI-backed handler builds a
    prompt, asks the chat LLM, pulls the JSON out of the answer and, if any of
    that fails, answers with a static fallback instead of an error.

    `chat_llm` needs an `invoke(messages, *, temperature, max_tokens) -> str`
    (see ChatLlmClient) and `store` is a MindMapStore.
    """

    def __init__(self, chat_llm, store):
        self.chat_llm = chat_llm
        self.store = store

    def _preview(self, data) -> str:
        try:
            return json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(data)

    def _ask_llm_json(self, system_prompt: str, prompt: str, max_tokens: int):
        raw = self.chat_llm.invoke(
            [SystemMessage(content=system_prompt), HumanMessage(content=prompt)],
            temperature=0.7,
            max_tokens=max_tokens,
        )
        return self.parse_llm_json(raw)

    def _expect_shape(self, data, kind):
        # yaml reads prose like "{aim}" as a mapping
        if kind == "mindmap":
            ok = isinstance(data, dict) and isinstance(data.get("nodes"), list)
        elif kind == "list":
            ok = isinstance(data, list)
        else:
            ok = isinstance(data, dict)
        if not ok:
            raise JsonParseError(f"AI response is not a {kind}: {self._preview(data)}")
        return data

    def _log_fallback(self, route: str, e: Exception) -> None:
        self.color_print(f"{route}: AI service failed, using fallback: {e!r}", color="yellow", level=logging.WARNING)

    # -----------------------
    # Mind maps
    # -----------------------

    def generate_mindmap(self, payload: dict) -> dict:
        logger.debug(f"generate_mindmap: received user data=\n{self._preview(payload)}")

        if payload.get("centerOnly"):
            return center_only_mindmap(payload.get("jobPath"), payload.get("aim"))

        prompt = self.unsafe_string_format(
            MINDMAP_PROMPT,
            aim=payload.get("aim"),
            job_path=payload.get("jobPath"),
            hobby=payload.get("hobby"),
            mbti=payload.get("mbti"),
            mbti_guidance=simple_mbti_guidance(payload.get("mbti")),
            salary=payload.get("salary"),
            role_model=payload.get("roleModel"),
        )
        try:
            mind_map = self._expect_shape(
                self._ask_llm_json(MINDMAP_SYSTEM_PROMPT, prompt, max_tokens=1024), "mindmap"
            )
            mind_map = self.normalize_mindmap_nodes(mind_map)
        except Exception as e:
            self._log_fallback("generate_mindmap", e)
            return fallback_mindmap(payload.get("aim"))

        logger.debug(f"generate_mindmap: final mind map=\n{self._preview(mind_map)}")
        return mind_map

    def save_mindmap(self, payload: dict) -> dict:
        return {"id": self.store.save(payload.get("nodes"), payload.get("edges"))}

    def list_mindmaps(self) -> list:
        return self.store.list_all()

    def get_mindmap(self, mindmap_id: str) -> dict | None:
        return self.store.get(mindmap_id)

    # -----------------------
    # Careers
    # -----------------------

    def suggestions(self, payload: dict) -> dict:
        node_content = payload.get("nodeContent")
        prompt = self.unsafe_string_format(SUGGESTIONS_PROMPT, node_content=node_content)
        try:
            suggestions = self._expect_shape(self._ask_llm_json(SUGGESTIONS_SYSTEM_PROMPT, prompt, max_tokens=512), "list")
        except Exception as e:
            self._log_fallback("suggestions", e)
            suggestions = career_specific_suggestions(node_content)
        return {"suggestions": suggestions}

    def career_details(self, payload: dict) -> dict:
        career_title = payload.get("careerTitle")
        prompt = self.unsafe_string_format(CAREER_DETAILS_PROMPT, career_title=career_title)
        try:
            career_info = self._expect_shape(self._ask_llm_json(CAREER_DETAILS_SYSTEM_PROMPT, prompt, max_tokens=800), "dict")
        except Exception as e:
            self._log_fallback("career_details", e)
            return fallback_career_details(career_title)

        logger.debug(f"career_details: parsed career info=\n{self._preview(career_info)}")
        return career_info

    def expand_career(self, payload: dict) -> dict:
        career_title = payload.get("careerTitle")
        level = payload.get("level")
        # JSON true must not count as level 1
        main = level == 1 and not isinstance(level, bool)
        scope = EXPAND_SCOPE_MAIN if main else EXPAND_SCOPE_SPECIFIC
        prompt = self.unsafe_string_format(EXPAND_CAREER_PROMPT, career_title=career_title, scope=scope)
        try:
            career_paths = self._expect_shape(self._ask_llm_json(EXPAND_CAREER_SYSTEM_PROMPT, prompt, max_tokens=1024), "list")
        except Exception as e:
            self._log_fallback("expand_career", e)
            career_paths = fallback_career_paths(career_title)
        else:
            logger.debug(f"expand_career: parsed career paths=\n{self._preview(career_paths)}")
        return {"careerPaths": career_paths}
