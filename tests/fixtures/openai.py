"""Client double exposing the ``chat.completions.create`` surface.

Production code only needs ``client.chat.completions.create(**kwargs)``
returning an object with ``choices[0].message.content``; this stub records
requests and replays queued contents.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List, Optional


class OpenAIStub:
    def __init__(self, *, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Optional[str]] = []
        self.chat = SimpleNamespace(
            completions=SimpleNamespace(create=self._create_completion)
        )

    def queue_response(self, content: Optional[str]) -> None:
        self.responses.append(content)

    @property
    def last_user_prompt(self) -> str:
        messages = self.calls[-1]["messages"] if self.calls else []
        return "\n".join(
            m["content"] for m in messages if m.get("role") == "user"
        )

    def _create_completion(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = self.responses.pop(0) if self.responses else ""
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])
