import dataclasses
import decimal
import enum
import json
from typing import Any, Dict


class PartJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, ExpressionPart):
            return o.to_dict()
        if dataclasses.is_dataclass(o):
            return dataclasses.asdict(o)
        if isinstance(o, enum.Enum):
            return o.value
        if isinstance(o, decimal.Decimal):
            return float(o)
        return super().default(o)


class PartType(enum.Enum):
    FUNCTION = "Function"
    VARIABLE = "Variable"
    NUMBER_LITERAL = "NumberLiteral"
    STRING_LITERAL = "StringLiteral"


@dataclasses.dataclass(frozen=True)
class ExpressionPart:
    type: PartType
    start: int
    # exclusive; for a function this is the offset of its "("
    end: int
    text: str

    def __len__(self):
        return self.end - self.start

    @property
    def is_variable(self) -> bool:
        return self.type is PartType.VARIABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "start": self.start,
            "end": self.end,
            "text": self.text,
        }


def to_json(parts, **kwargs) -> str:
    return json.dumps(list(parts), cls=PartJSONEncoder, **kwargs)
