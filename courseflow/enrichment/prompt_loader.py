import json
from pathlib import Path

from courseflow.enrichment.exceptions import SummarizationError

PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load the prompt template ``{name}_prompt.txt``.

    Raises:
        SummarizationError: if the file cannot be read.
    """
    path = (prompt_dir or PROMPT_DIR) / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SummarizationError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> dict[str, object]:
    """Load and parse the response schema ``{name}_schema.json``.

    Raises:
        SummarizationError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or PROMPT_DIR) / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SummarizationError(f"Failed to load JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise SummarizationError(f"JSON schema {path.name} must be an object")
    return schema
