"""Validation of profile input."""

from collections.abc import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from calai.domain.profile import ActivityLevel, Gender, Goal, UserProfile
from calai.errors import ValidationError


class ProfileInput(BaseModel):
    """Untrusted profile payload from onboarding or storage."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    age: int = Field(gt=0, le=150)
    gender: Gender
    height_cm: float = Field(
        gt=0,
        le=300,
        allow_inf_nan=False,
        validation_alias=AliasChoices("height_cm", "heightCm", "height"),
    )
    weight_kg: float = Field(
        gt=0,
        le=700,
        allow_inf_nan=False,
        validation_alias=AliasChoices("weight_kg", "weightKg", "weight"),
    )
    activity_level: ActivityLevel = Field(
        validation_alias=AliasChoices("activity_level", "activityLevel")
    )
    goal: Goal

    def to_domain(self) -> UserProfile:
        """Return the domain profile."""
        return UserProfile(
            name=self.name.strip(),
            age=self.age,
            gender=self.gender,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            activity_level=self.activity_level,
            goal=self.goal,
        )


def parse_profile(data: Mapping[str, object]) -> UserProfile:
    """Validate raw profile data, rejecting non-numeric or missing fields."""
    try:
        return ProfileInput.model_validate(dict(data)).to_domain()
    except PydanticValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in err["loc"]) for err in exc.errors()}
        )
        raise ValidationError(f"Invalid profile fields: {', '.join(fields)}") from exc
