from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FirebaseProviderInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    provider_id: str = Field(min_length=1, max_length=128)
    uid: str = Field(min_length=1, max_length=256)
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    phone_number: str | None = None


class FirebaseUserPayload(BaseModel):
    """The subset of a verified Firebase user record that is mirrored in Postgres."""

    model_config = ConfigDict(extra="ignore")

    uid: str = Field(min_length=1, max_length=128)
    email: str | None = Field(default=None, max_length=320)
    email_verified: bool = False
    phone_number: str | None = Field(default=None, max_length=32)
    display_name: str | None = None
    photo_url: str | None = None
    sign_in_provider: str | None = Field(default=None, max_length=128)
    provider_data: list[FirebaseProviderInfo] = Field(default_factory=list)

    def provider_snapshot(self, info: FirebaseProviderInfo) -> dict[str, object]:
        return info.model_dump(exclude={"provider_id", "uid"}, exclude_none=True)
