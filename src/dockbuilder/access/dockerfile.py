import re
import logging
from pathlib import Path
from typing import Dict, Iterator, Tuple

from ..exceptions import BaseImageResolutionError

logger = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::?-(?P<default>[^}]*))?\}|\$(?P<plain>[A-Za-z_][A-Za-z0-9_]*)"
)


class DockerfileExtractor:
    """Extracts the base image (first FROM) of a Dockerfile."""

    def extract_base_image(self, dockerfile: Path) -> str:
        try:
            text = Path(dockerfile).read_text(encoding='utf-8')
        except OSError as e:
            raise BaseImageResolutionError(f"Cannot read Dockerfile '{dockerfile}': {e}") from e

        args: Dict[str, str] = {}
        for instruction, value in self.instructions(text):
            if instruction == "ARG":
                name, sep, default = value.partition("=")
                if sep:
                    args[name.strip()] = default.strip().strip("\"'")
            elif instruction == "FROM":
                tokens = [token for token in value.split() if not token.startswith("--")]
                if not tokens:
                    raise BaseImageResolutionError(f"Empty FROM instruction in '{dockerfile}'")
                base_image = self._interpolate(tokens[0], args, dockerfile)
                logger.debug(f"[Dockerfile] Base image of '{dockerfile}' is '{base_image}'")
                return base_image

        raise BaseImageResolutionError(f"No FROM instruction found in '{dockerfile}'")

    @staticmethod
    def instructions(text: str) -> Iterator[Tuple[str, str]]:
        """Yield `(INSTRUCTION, arguments)` pairs, joining `\\` continuation lines and skipping comments."""
        pending = ""
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not pending and (not line or line.startswith("#")):
                continue
            if pending and line.startswith("#"):
                continue
            if line.endswith("\\"):
                pending += line[:-1] + " "
                continue
            line = pending + line
            pending = ""
            yield _split_instruction(line)
        if pending.strip():
            yield _split_instruction(pending)

    @staticmethod
    def _interpolate(value: str, args: Dict[str, str], dockerfile: Path) -> str:
        def replace(match: re.Match) -> str:
            name = match.group("braced") or match.group("plain")
            if name in args and args[name]:
                return args[name]
            if match.group("default") is not None:
                return match.group("default")
            raise BaseImageResolutionError(
                f"Base image '{value}' in '{dockerfile}' uses ARG '{name}' without a default"
            )

        return VARIABLE_PATTERN.sub(replace, value)


def _split_instruction(line: str) -> Tuple[str, str]:
    parts = line.split(None, 1)
    keyword = parts[0] if parts else ""
    rest = parts[1] if len(parts) > 1 else ""
    return keyword.upper(), rest.strip()
