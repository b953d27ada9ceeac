"""
Safety gate for monetary and value-transfer actions.

Checks, in order: parameter completeness, recipient reputation, contract
call safety and the value ceiling.  The first failing check decides the
verdict.  Contract calls that cannot be verified are rejected.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from critique_core.config import DEFAULT_CONFIG, CritiqueConfig
from critique_core.models import (
    AddressCategory,
    AddressReputation,
    CandidateAction,
    ContractSafety,
    EthicalVerdict,
)
from critique_core.normalizer import as_number, as_text

log = logging.getLogger(__name__)


class MonetaryActionEvaluator:
    """Evaluates blockchain actions that move or authorise value."""

    label = "monetary safety"

    MONETARY_ACTIONS: FrozenSet[str] = frozenset({
        "executeTransaction",
        "deployContract",
        "callContract",
        "signMessage",
        "approveToken",
        "transferToken",
    })

    # action -> (required params, rejection reason)
    REQUIRED_PARAMS: Dict[str, Tuple[Tuple[str, ...], str]] = {
        "executeTransaction": (("to",), "Missing recipient address"),
        "deployContract": (("bytecode",), "Missing contract bytecode"),
        "callContract": (("to", "data"), "Missing contract address or call data"),
        "signMessage": (("message",), "Missing message to sign"),
        "approveToken": (
            ("token", "spender", "amount"),
            "Missing token approval parameters (token, spender, or amount)",
        ),
        "transferToken": (
            ("token", "to", "amount"),
            "Missing token transfer parameters (token, recipient, or amount)",
        ),
    }

    def __init__(self, config: CritiqueConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.malicious_addresses: FrozenSet[str] = frozenset(config.malicious_addresses)

    def is_monetary(self, action: CandidateAction) -> bool:
        return action.action in self.MONETARY_ACTIONS

    def validate_params(self, action: CandidateAction) -> Optional[str]:
        """Return the missing-parameter reason, or ``None`` when complete."""
        spec = self.REQUIRED_PARAMS.get(action.action)
        if spec is None:
            return "Unknown blockchain action"
        required, reason = spec
        if any(not action.params.get(name) for name in required):
            return reason
        return None

    def check_address(self, address: str) -> AddressReputation:
        if address in self.malicious_addresses:
            return AddressReputation(
                address=address,
                category=AddressCategory.MALICIOUS,
                reason="Address is known to be associated with scams or malicious activities.",
            )
        if address.startswith(self.config.suspicious_prefix):
            return AddressReputation(
                address=address,
                category=AddressCategory.SUSPICIOUS,
                reason=f"Address matches suspicious pattern (starts with {self.config.suspicious_prefix}).",
            )
        if address.startswith(self.config.trusted_contract_prefix):
            return AddressReputation(
                address=address,
                category=AddressCategory.SAFE,
                reason="Address belongs to a verified contract.",
            )
        return AddressReputation(
            address=address,
            category=AddressCategory.UNKNOWN,
            reason="No information available for this address.",
        )

    def check_contract_safety(self, contract_address: str, data: str) -> ContractSafety:
        if contract_address.startswith(self.config.trusted_contract_prefix):
            return ContractSafety(safe=True, reason="Contract is verified and safe.")
        for marker in self.config.dangerous_call_markers:
            if marker in data:
                return ContractSafety(
                    safe=False,
                    reason=f"Contract interaction includes dangerous operations ({marker}).",
                    risks=["Potential loss of funds"],
                )
        return ContractSafety(
            safe=False,
            reason="Contract safety could not be verified.",
            risks=["Unknown contract behavior"],
        )

    def check_value(self, value: float, token: Optional[str] = None) -> EthicalVerdict:
        ceiling = self.config.max_transaction_value
        if value > ceiling:
            return EthicalVerdict(
                approved=False,
                reason=(
                    f"Transaction value exceeds maximum allowed limit of "
                    f"{ceiling:g} {token or self.config.default_token}"
                ),
            )
        return EthicalVerdict(approved=True, reason="Transaction value within acceptable limits")

    def evaluate(self, action: CandidateAction) -> EthicalVerdict:
        if not self.is_monetary(action):
            return EthicalVerdict(approved=True, reason="Not a blockchain action")

        missing = self.validate_params(action)
        if missing is not None:
            return EthicalVerdict(approved=False, reason=missing)

        params = action.params
        recipient = as_text(params.get("to"))
        if recipient:
            reputation = self.check_address(recipient)
            if reputation.category == AddressCategory.MALICIOUS:
                return EthicalVerdict(approved=False, reason=f"Malicious recipient address: {reputation.reason}")
            if reputation.category == AddressCategory.SUSPICIOUS:
                return EthicalVerdict(approved=False, reason=f"Suspicious recipient address: {reputation.reason}")

        data = as_text(params.get("data"))
        if len(data) > 2:
            contract = self.check_contract_safety(recipient, data)
            if not contract.safe:
                return EthicalVerdict(approved=False, reason=f"Unsafe contract interaction: {contract.reason}")

        if params.get("value"):
            token = params.get("token")
            verdict = self.check_value(as_number(params.get("value")), token if isinstance(token, str) else None)
            if not verdict.approved:
                return verdict

        return EthicalVerdict(approved=True, reason="Blockchain action passed all ethical checks")

    def check(self, action: CandidateAction) -> Optional[str]:
        """Rule-protocol adapter so the gate can join an ethical rule chain."""
        verdict = self.evaluate(action)
        if verdict.approved:
            return None
        log.debug("Monetary gate rejected %s: %s", action.action, verdict.reason)
        return verdict.reason
