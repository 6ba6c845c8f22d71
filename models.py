from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from scoring.core import (
    DEFAULT_SCORING_SCALE,
    MAX_SCORING_SCALE,
    MAX_WEIGHT,
    MIN_SCORING_SCALE,
)

MAX_INTERNET_RATING = 5.0


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, int(value)))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | None) -> datetime:
    if not value:
        return utc_now()
    return datetime.fromisoformat(value)


def clamp_internet_rating(value: float | None) -> float | None:
    if value is None:
        return None
    return max(0.0, min(MAX_INTERNET_RATING, float(value)))


@dataclass
class Result:
    option: str
    score: float


@dataclass
class Criterion:
    name: str
    weight: int = 1
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "weight": self.weight, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> "Criterion":
        return cls(
            name=data.get("name", "Criterion"),
            weight=clamp(data.get("weight", 1), 1, MAX_WEIGHT),
            description=data.get("description"),
        )


@dataclass
class Option:
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    # external review score, 0.0 to 5.0; informational only, never scored
    internet_rating: Optional[float] = None
    ratings: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "internet_rating": self.internet_rating,
            "ratings": dict(self.ratings),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Option":
        return cls(
            name=data.get("name", "Option"),
            description=data.get("description"),
            image_url=data.get("image_url"),
            internet_rating=clamp_internet_rating(data.get("internet_rating")),
            ratings={key: int(value) for key, value in data.get("ratings", {}).items()},
        )


@dataclass
class Decision:
    title: str
    description: Optional[str] = None
    scoring_scale: int = DEFAULT_SCORING_SCALE
    criteria: List[Criterion] = field(default_factory=list)
    options: List[Option] = field(default_factory=list)
    results: List[Result] = field(default_factory=list)
    date_created: datetime = field(default_factory=utc_now)
    last_modified: datetime = field(default_factory=utc_now)

    def touch(self) -> None:
        self.last_modified = utc_now()

    def find_criterion(self, name: str) -> Criterion | None:
        return next((criterion for criterion in self.criteria if criterion.name == name), None)

    def find_option(self, name: str) -> Option | None:
        return next((option for option in self.options if option.name == name), None)

    def criterion_weights(self) -> Dict[str, int]:
        return {criterion.name: criterion.weight for criterion in self.criteria}

    def add_criterion(self, name: str, weight: int = 1, description: str | None = None) -> Criterion:
        name = name.strip()
        if not name:
            raise ValueError("Criterion name cannot be empty.")
        if self.find_criterion(name) is not None:
            raise ValueError(f"Criterion '{name}' already exists.")
        criterion = Criterion(name=name, weight=clamp(weight, 1, MAX_WEIGHT), description=description)
        self.criteria.append(criterion)
        return criterion

    def remove_criterion(self, name: str) -> None:
        self.criteria = [criterion for criterion in self.criteria if criterion.name != name]
        for option in self.options:
            option.ratings.pop(name, None)

    def set_weight(self, name: str, weight: int) -> None:
        criterion = self.find_criterion(name)
        if criterion is None:
            raise KeyError(name)
        criterion.weight = clamp(weight, 1, MAX_WEIGHT)

    def add_option(
        self,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        internet_rating: float | None = None,
    ) -> Option:
        name = name.strip()
        if not name:
            raise ValueError("Option name cannot be empty.")
        if self.find_option(name) is not None:
            raise ValueError(f"Option '{name}' already exists.")
        option = Option(
            name=name,
            description=description,
            image_url=image_url,
            internet_rating=clamp_internet_rating(internet_rating),
        )
        self.options.append(option)
        return option

    def remove_option(self, name: str) -> None:
        self.options = [option for option in self.options if option.name != name]

    def set_rating(self, option_name: str, criterion_name: str, value: int) -> None:
        option = self.find_option(option_name)
        if option is None:
            raise KeyError(option_name)
        if self.find_criterion(criterion_name) is None:
            raise KeyError(criterion_name)
        value = clamp(value, 0, self.scoring_scale)
        if value == 0:
            option.ratings.pop(criterion_name, None)
        else:
            option.ratings[criterion_name] = value

    def set_scoring_scale(self, scale: int) -> None:
        self.scoring_scale = clamp(scale, MIN_SCORING_SCALE, MAX_SCORING_SCALE)
        self.normalize_ratings()

    def normalize_ratings(self) -> None:
        """Clamp every rating into [0, scoring_scale] and drop unrated (0) entries."""
        for option in self.options:
            option.ratings = {
                name: clamp(value, 0, self.scoring_scale)
                for name, value in option.ratings.items()
                if clamp(value, 0, self.scoring_scale) > 0
            }

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "scoring_scale": self.scoring_scale,
            "date_created": self.date_created.isoformat(),
            "last_modified": self.last_modified.isoformat(),
            "criteria": [criterion.to_dict() for criterion in self.criteria],
            "options": [option.to_dict() for option in self.options],
            "results": [result.__dict__ for result in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Decision":
        results = [Result(**item) for item in data.get("results", [])]
        decision = cls(
            title=data.get("title", "Untitled"),
            description=data.get("description"),
            scoring_scale=clamp(
                data.get("scoring_scale", DEFAULT_SCORING_SCALE), MIN_SCORING_SCALE, MAX_SCORING_SCALE
            ),
            criteria=[Criterion.from_dict(item) for item in data.get("criteria", [])],
            options=[Option.from_dict(item) for item in data.get("options", [])],
            results=results,
            date_created=parse_timestamp(data.get("date_created")),
            last_modified=parse_timestamp(data.get("last_modified")),
        )
        decision.normalize_ratings()
        return decision
