"""Map missing fields to human-readable remediation guidance."""

from typing import List, Mapping, Sequence

from app.services.patterns import FALLBACK_RECOMMENDATION, RECOMMENDATION_TEMPLATES


def humanize_field(field: str) -> str:
    return field.replace("_", " ")


def generate_recommendations(
    missing_fields: Sequence[str],
    templates: Mapping[str, str] = RECOMMENDATION_TEMPLATES,
) -> List[str]:
    """Return one recommendation per missing field, in the same order.

    Fields without a dedicated template get a generic message naming the
    field with underscores replaced by spaces.
    """
    return [
        templates.get(field) or FALLBACK_RECOMMENDATION.format(field=humanize_field(field))
        for field in missing_fields
    ]
