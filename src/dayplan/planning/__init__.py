"""Auto-assignment pipeline: extract, validate, and apply planner proposals."""

from .applier import AppliedCallback, apply_batch
from .pool import TitlePool
from .proposals import Malformed, Proposal, ProposalEntry, extract_payload, parse_proposals
from .validator import ValidatedAssignment, validate_entries, validate_proposals

__all__ = [
    "AppliedCallback",
    "Malformed",
    "Proposal",
    "ProposalEntry",
    "TitlePool",
    "ValidatedAssignment",
    "apply_batch",
    "extract_payload",
    "parse_proposals",
    "validate_entries",
    "validate_proposals",
]
