"""Static word lists used by the local analyzer and the keyword extractor."""

from __future__ import annotations

from dataclasses import dataclass, field

POSITIVE_TERMS = (
    "good", "great", "excellent", "positive", "growth", "improve", "success",
    "achieve", "benefit", "gain", "profit", "innovation", "progress", "advance",
    "sustainable", "efficient", "reduce", "save", "clean", "green", "renewable",
    "commitment", "initiative", "leadership", "responsibility", "transparency",
    "diversity", "inclusion", "community", "investment", "opportunity", "award",
    "recognition", "milestone", "breakthrough", "partnership", "collaboration",
)

NEGATIVE_TERMS = (
    "bad", "poor", "negative", "decline", "loss", "fail", "failure", "risk",
    "concern", "problem", "issue", "challenge", "violation", "scandal", "lawsuit",
    "pollution", "emission", "waste", "damage", "harm", "controversy", "criticism",
    "fine", "penalty", "breach", "misconduct", "fraud", "corruption", "layoff",
    "downturn", "recession", "crisis", "disaster", "accident", "spill", "leak",
)

ENVIRONMENTAL_TERMS = (
    "climate", "carbon", "emissions", "renewable", "sustainability", "green",
    "environmental", "pollution", "energy", "waste", "recycling", "solar",
    "wind", "biodiversity", "conservation", "eco", "footprint", "neutral",
    "water", "air", "forest", "deforestation", "plastic", "electric", "clean",
)

SOCIAL_TERMS = (
    "social", "diversity", "equality", "labor", "human rights", "community",
    "employee", "workplace", "safety", "health", "inclusion", "equity",
    "workers", "training", "education", "welfare", "fair", "discrimination",
    "harassment", "supply chain", "stakeholder", "philanthropy", "volunteer",
)

GOVERNANCE_TERMS = (
    "governance", "ethics", "compliance", "transparency", "board", "leadership",
    "accountability", "audit", "regulation", "policy", "executive", "shareholder",
    "voting", "compensation", "disclosure", "oversight", "independent", "risk",
    "management", "integrity", "corporate", "fiduciary", "stewardship",
)

GENERIC_ESG_TERMS = ("esg", "sustainable", "responsibility", "stakeholder")


@dataclass(frozen=True)
class Lexicon:
    """Read-only term tables shared by every analysis call.

    Build once at start-up and pass the same instance to every analyzer.
    """

    positive: frozenset[str] = frozenset(POSITIVE_TERMS)
    negative: frozenset[str] = frozenset(NEGATIVE_TERMS)
    environmental: tuple[str, ...] = ENVIRONMENTAL_TERMS
    social: tuple[str, ...] = SOCIAL_TERMS
    governance: tuple[str, ...] = GOVERNANCE_TERMS
    generic: tuple[str, ...] = GENERIC_ESG_TERMS
    _esg_terms: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        union = frozenset(self.environmental + self.social + self.governance + self.generic)
        object.__setattr__(self, "_esg_terms", union)

    @property
    def dimensions(self) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
        """Term sets in (environmental, social, governance) order."""
        return (self.environmental, self.social, self.governance)

    @property
    def esg_terms(self) -> frozenset[str]:
        """Every ESG term plus the generic ones; used to rank keywords."""
        return self._esg_terms


DEFAULT_LEXICON = Lexicon()
