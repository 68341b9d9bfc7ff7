import json
import logging
import re

import commentjson
import yaml
from json_repair import repair_json

logger = logging.getLogger("growgraph")

NO_LABEL = "No Label"
LABEL_FIELDS = ("name", "title", "text", "value")


class JsonExtractionError(Exception):
    pass


class JsonParseError(Exception):
    pass


class Utils():

    def color_print(self, text, color=None, level=logging.INFO):
        COLOR_CODES = {
            'black': '30', 'red': '31', 'green': '32', 'yellow': '33', 'blue': '34', 'magenta': '35',
            'cyan': '36', 'white': '37', 'bright_black': '90', 'bright_red': '91', 'bright_green': '92',
            'bright_yellow': '93', 'bright_blue': '94', 'bright_magenta': '95', 'bright_cyan': '96', 'bright_white': '97'
        }
        if color and color.lower() in COLOR_CODES:
            color_code = COLOR_CODES[color.lower()]
            start = f"\033[{color_code}m"
            end = "\033[0m"
            text = f"{start}{text}{end}"
        logger.log(level, str(text))
        return False

    def clean_triple_backticks(self, code) -> str:
        pattern = r'```[a-zA-Z]*\n?|```\n?'
        return re.sub(pattern, '', code)

    def unsafe_string_format(self, dest_string, print_unused_keys_report=True, **kwargs):
        """
        Replaces {key} placeholders only for the keys passed in kwargs.

        Unlike str.format, braces that belong to JSON examples inside a prompt
        are left alone, so templates don't need {{ }} escaping.
        """
        missing_keys = []

        def replacer(match):
            key = match.group(1)
            if key in kwargs:
                return str(kwargs[key])
            missing_keys.append(key)
            return match.group(0)

        pattern = re.compile(r'\{(\w+)\}')
        result = pattern.sub(replacer, dest_string)
        if missing_keys and print_unused_keys_report:
            logger.debug(f"Missing keys within string-to-format in unsafe_string_format: {', '.join(missing_keys)}")
        return result

    # -----------------------
    # LLM output parsing
    # -----------------------

    def extract_json_span(self, text) -> str | None:
        """
        Returns the substring running from the first '{' or '[' to the last
        '}' or ']' of the (stripped) text, or None when there is no opening
        delimiter, no closing one, or the close comes before the open.

        Nesting is not checked; a malformed span is left for the parser to reject.
        """
        if not text:
            return None
        text = text.strip()

        first_curly = text.find('{')
        first_square = text.find('[')
        if first_curly != -1 and (first_square == -1 or first_curly < first_square):
            start = first_curly
        elif first_square != -1:
            start = first_square
        else:
            return None

        last_curly = text.rfind('}')
        last_square = text.rfind(']')
        if last_curly != -1 and (last_square == -1 or last_curly > last_square):
            end = last_curly
        elif last_square != -1:
            end = last_square
        else:
            return None

        if end < start:
            return None
        return text[start:end + 1]

    def load_fault_tolerant_json(self, json_str):
        """
        Attempts to load a JSON-like string: commentjson first (LLMs echo the
        // comments of our prompt templates), then pyyaml on a sanitized copy,
        then both again on the output of json_repair.
        Raises JsonParseError if nothing yields data.
        """
        def sanitize_json_string(input_str):
            def process_string_segment(match):
                content = match.group(1)
                # escape lone backslashes and literal newlines inside strings
                content = re.sub(r'(?<!\\)\\(?![bfnrtu"\\/])', r'\\\\', content)
                content = re.sub(r'(?<!\\)\n', r'\\n', content)
                return f'"{content}"'

            input_str = self.clean_triple_backticks(input_str)
            input_str = re.sub(r'^\s*//.*?$|/\*.*?\*/', '', input_str, flags=re.MULTILINE | re.DOTALL)
            return re.sub(r'(?<!\\)"((?:[^"\\]|\\.)*?)"', process_string_segment, input_str, flags=re.DOTALL)

        def load_json(json_str):
            err = ""
            try:
                return commentjson.loads(self.clean_triple_backticks(json_str)), ""
            except Exception as e:
                err = str(e)
            try:
                data = yaml.safe_load(sanitize_json_string(json_str))
                if isinstance(data, (dict, list)):
                    return data, ""
                err += "\n--\nYAML parsing did not produce an object or array"
            except Exception as e:
                err += "\n--\n" + str(e)
            return None, err

        data, err = load_json(json_str)
        if isinstance(data, (dict, list)):
            return data
        r_data, r_err = load_json(repair_json(json_str))
        if isinstance(r_data, (dict, list)) and r_data:
            return r_data
        raise JsonParseError(f"load_fault_tolerant_json: JSON parsing failed: {r_err or err}")

    def parse_llm_json(self, text):
        span = self.extract_json_span(text)
        if not span:
            raise JsonExtractionError("Failed to extract valid JSON from AI response")
        return self.load_fault_tolerant_json(span)

    # -----------------------
    # Mind map nodes
    # -----------------------

    def _node_label(self, node: dict):
        data = node.get("data")
        if isinstance(data, dict) and data.get("label"):
            return data["label"]
        if isinstance(data, str) and data:
            return data
        if isinstance(data, list) and data and isinstance(data[0], str):
            return data[0]
        if isinstance(data, dict):
            for field in LABEL_FIELDS:
                if data.get(field):
                    return data[field]
        if node.get("id"):
            return node["id"]
        return NO_LABEL

    def normalize_mindmap_nodes(self, mind_map):
        """
        Coerces every node's `data` into {"label": ...}. Anything that isn't a
        dict with a list of nodes is returned unchanged.
        """
        if not isinstance(mind_map, dict) or not isinstance(mind_map.get("nodes"), list):
            return mind_map

        normalized = []
        for idx, node in enumerate(mind_map["nodes"]):
            if not isinstance(node, dict):
                node = {"data": node}
            label = self._node_label(node)
            logger.debug(f"node[{idx}] id={node.get('id')} data={json.dumps(node.get('data'), ensure_ascii=False, default=str)} label={label}")
            normalized.append({**node, "data": {"label": label}})

        mind_map["nodes"] = normalized
        return mind_map
