from dataclasses import dataclass, asdict
from typing import List, Optional, Union


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    role: str


@dataclass(frozen=True)
class SectionFile:
    key: str
    value: str
    theme_id: str

    def as_input(self) -> dict:
        """ThemeFileInput variables for the themeFileCreate mutation."""
        return {"key": self.key, "value": self.value, "themeId": self.theme_id}


@dataclass(frozen=True)
class UserError:
    field: Optional[List[str]]
    message: str

    @classmethod
    def from_payload(cls, payload: dict) -> "UserError":
        return cls(field=payload.get("field"), message=payload.get("message", ""))


@dataclass(frozen=True)
class Success:
    message: str

    status_code = 200

    def to_json(self) -> dict:
        return {"message": self.message}


@dataclass(frozen=True)
class Failure:
    error: str
    details: Optional[List[UserError]] = None

    status_code = 400

    def to_json(self) -> dict:
        payload = {"error": self.error}
        if self.details is not None:
            payload["details"] = [asdict(detail) for detail in self.details]
        return payload


WorkflowResult = Union[Success, Failure]
