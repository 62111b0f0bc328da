# ABOUTME: Pydantic schemas for data validation and serialization.
# ABOUTME: Defines the OPML intermediate tree, feed entries/records, and auth payloads.

from pydantic import BaseModel, ConfigDict, Field


class OpmlOutline(BaseModel):
    """One <outline> element: a category or a feed."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    xml_url: str = ""
    html_url: str = ""
    description: str = ""
    children: list["OpmlOutline"] = []


class OpmlDocument(BaseModel):
    """Validated <opml><body> content, top-level outlines in document order."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    outlines: list[OpmlOutline] = Field(min_length=1)


class FeedEntry(BaseModel):
    """A feed extracted from OPML, keyed by the feeds table column names."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    xml_url: str = Field(alias="xmlurl")
    html_url: str = Field("", alias="htmlurl")
    description: str = ""

    def for_user(self, user_id: str) -> "FeedRecord":
        return FeedRecord(**self.model_dump(), user_id=user_id)


class FeedRecord(FeedEntry):
    """A feed entry owned by an authenticated user, ready to persist."""

    user_id: str = Field(min_length=1)

    def to_row(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class Credentials(BaseModel):
    """Email/password pair forwarded to Supabase Auth."""

    email: str
    password: str
