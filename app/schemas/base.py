# app/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    프론트엔드(JS)와 주고받는 JSON은 camelCase.
    요청은 camelCase / snake_case 둘 다 허용하고, 응답은 camelCase로 직렬화한다.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
