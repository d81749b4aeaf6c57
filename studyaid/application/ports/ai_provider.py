from typing import Any, Dict, Optional, Protocol


class AIProvider(Protocol):
    def generate_json(
        self,
        prompt: str,
        response_schema: Dict[str, Any],
        image_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        ...
