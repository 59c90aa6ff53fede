# This project was developed with assistance from AI tools.
"""Widget configuration -- the struct the embed loader hands to the factory."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_API_URL = "/api/chat"


class Theme(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary_color: str | None = Field(default=None, alias="primaryColor")


class WidgetConfig(BaseModel):
    """Configuration for one widget instance.

    Accepts the camelCase keys the embed loader emits. The customer
    identifier is read from ``customerDomain``, ``customerId`` or
    ``customer_domain``, whichever is present.
    """

    model_config = ConfigDict(populate_by_name=True)

    container_id: str | None = Field(default=None, alias="containerId")
    api_url: str = Field(default=DEFAULT_API_URL, alias="apiUrl")
    base_url: str | None = Field(default=None, alias="baseUrl")
    customer_domain: str | None = Field(
        default=None,
        validation_alias=AliasChoices("customerDomain", "customerId", "customer_domain"),
    )
    theme: Theme = Field(default_factory=Theme)
