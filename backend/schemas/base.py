from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordStoreModel(BaseModel):
    """
    Base for every record exchanged with the Record Store and the summary views.

    Fields are snake_case in Python and camelCase on the wire (recordDate,
    mortaliteNbre ...). Unknown fields sent by the Record Store are ignored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )
