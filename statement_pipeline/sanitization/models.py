from dataclasses import asdict, dataclass, field, fields


@dataclass(frozen=True)
class SecurityBreakdown:
    """Counts of sensitive values masked, per category."""

    account_numbers: int = 0
    mobile_numbers: int = 0
    emails: int = 0
    pan_ids: int = 0
    customer_ids: int = 0
    ifsc_codes: int = 0
    card_numbers: int = 0
    addresses: int = 0
    names: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"SecurityBreakdown.{f.name} must not be negative")

    def __add__(self, other: "SecurityBreakdown") -> "SecurityBreakdown":
        if not isinstance(other, SecurityBreakdown):
            return NotImplemented
        return SecurityBreakdown(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class Detection:
    """Single masked value."""

    type: str  # breakdown field name, e.g. "emails", "card_numbers"
    original: str
    masked: str
    position: int  # offset in the text the pattern ran on


@dataclass
class SanitizationResult:
    """Output of the sanitizer."""

    sanitized_text: str
    detections: list[Detection] = field(default_factory=list)
    breakdown: SecurityBreakdown = field(default_factory=SecurityBreakdown)


@dataclass(frozen=True)
class SanitizationConfig:
    """Which categories to mask and how."""

    account_numbers: bool = True
    mobile_numbers: bool = True
    emails: bool = True
    pan_ids: bool = True
    customer_ids: bool = True
    ifsc_codes: bool = True
    card_numbers: bool = True
    addresses: bool = True
    names: bool = False
    mask_character: str = "*"
    preserve_format: bool = True
