"""
Data models for the critique pipeline.

Structured records are frozen dataclasses, one per category, so every
downstream stage can dispatch on the concrete record type.  Results that
leave the pipeline (candidate actions, verdicts, the critique itself) are
pydantic models so callers can serialise them directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Semantic category assigned to a raw event."""

    TRANSACTION = "transaction"
    MESSAGE = "message"
    EVENT = "event"
    USER_INPUT = "userInput"
    UNKNOWN = "unknown"


class Risk(str, Enum):
    LOW = "low"
    HIGH = "high"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# ---------------------------------------------------------------------------
# Structured records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransactionRecord:
    category: ClassVar[Category] = Category.TRANSACTION

    hash: Any = None
    from_address: Any = None
    to: Any = None
    value: float = 0
    data: str = ""
    gas: Any = None
    chain_id: Any = None
    previous_txs: Tuple[Any, ...] = ()

    # Derived by the enricher
    transaction_type: Optional[str] = None
    risk: Optional[Risk] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to,
            "value": self.value,
            "data": self.data,
            "gas": self.gas,
            "chainId": self.chain_id,
            "previousTxs": list(self.previous_txs),
        }
        if self.transaction_type is not None:
            out["transactionType"] = self.transaction_type
        if self.risk is not None:
            out["risk"] = self.risk.value
        return out


@dataclass(frozen=True)
class MessageRecord:
    category: ClassVar[Category] = Category.MESSAGE

    content: str = ""
    sender: Any = None
    timestamp: float = 0.0
    conversation_history: Tuple[Any, ...] = ()

    intent: Optional[str] = None
    sentiment: Optional[Sentiment] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "content": self.content,
            "sender": self.sender,
            "timestamp": self.timestamp,
            "conversationHistory": list(self.conversation_history),
        }
        if self.intent is not None:
            out["intent"] = self.intent
        if self.sentiment is not None:
            out["sentiment"] = self.sentiment.value
        return out


@dataclass(frozen=True)
class EventRecord:
    category: ClassVar[Category] = Category.EVENT

    event_name: Any = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    block_number: Any = None
    transaction_hash: Any = None

    event_category: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "eventName": self.event_name,
            "parameters": dict(self.parameters),
            "blockNumber": self.block_number,
            "transactionHash": self.transaction_hash,
        }
        if self.event_category is not None:
            out["eventCategory"] = self.event_category
        return out


@dataclass(frozen=True)
class UserInputRecord:
    category: ClassVar[Category] = Category.USER_INPUT

    input: Any = None
    input_type: Any = None
    timestamp: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {"input": self.input, "type": self.input_type, "timestamp": self.timestamp}


@dataclass(frozen=True)
class UnknownRecord:
    category: ClassVar[Category] = Category.UNKNOWN

    fields: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.fields)


StructuredRecord = Union[TransactionRecord, MessageRecord, EventRecord, UserInputRecord, UnknownRecord]


@dataclass(frozen=True)
class RecordMetadata:
    category: Category
    source: str
    timestamp: float


# ---------------------------------------------------------------------------
# Actions and verdicts
# ---------------------------------------------------------------------------


class CandidateAction(BaseModel):
    """An operation proposed by the reasoning stage, not yet approved."""

    model_config = ConfigDict(frozen=True)

    action: str
    params: Dict[str, Any] = Field(default_factory=dict)
    justification: str = ""


class Proposal(BaseModel):
    model_config = ConfigDict(frozen=True)

    actions: List[CandidateAction] = Field(default_factory=list)
    reasoning: str = ""


class EthicalVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    approved: bool
    reason: str


class UncertaintyFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    uncertain: bool = False
    reason: str = ""


class CritiqueResult(BaseModel):
    """Outcome of one pipeline run.

    Serialises with camelCase keys (``approvedActions``...) when dumped
    ``by_alias``.  Collections are tuples, so a result cannot change once
    computed.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    confidence: float = Field(ge=0.0, le=1.0)
    limitations: Tuple[str, ...] = ()
    uncertainties: Tuple[str, ...] = ()
    approved_actions: Tuple[CandidateAction, ...] = ()
    rejected_actions: Tuple[CandidateAction, ...] = ()
    explanation: str = ""

    @property
    def primary_action(self) -> Optional[CandidateAction]:
        """The first approved action, treated as primary by consumers."""
        return self.approved_actions[0] if self.approved_actions else None


class DeferralDecision(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    should_defer: bool
    reason: str


class AddressCategory(str, Enum):
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"
    UNKNOWN = "unknown"


class AddressReputation(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    category: AddressCategory
    reason: str = ""


class ContractSafety(BaseModel):
    model_config = ConfigDict(frozen=True)

    safe: bool
    reason: str
    risks: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class EthicalConstraints(BaseModel):
    """Constraint toggles carried through the pipeline.

    Read and logged; no rule is gated on them yet.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    allow_high_value_transactions: bool = False
    require_explicit_consent: bool = False
    prevent_misleading_responses: bool = True


class PipelineOptions(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    ethical_constraints: EthicalConstraints = Field(default_factory=EthicalConstraints)
    max_processing_time: float = Field(default=5000.0, ge=0.0, description="Advisory budget in milliseconds.")
    debug: bool = False
    monetary_gate: bool = False


@dataclass(frozen=True)
class PipelineTrace:
    """Intermediate outputs of the classification, enrichment and reasoning stages."""

    metadata: RecordMetadata
    record: StructuredRecord
    proposal: Proposal
