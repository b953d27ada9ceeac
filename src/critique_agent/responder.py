"""Turn responder that acts on the primary approved action.

Demonstrates the contract between the critique and an agent: respect a
deferral, otherwise act on the first approved action only.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from critique_agent.extension import CONTEXT_KEY, CarContext, CritiqueExtension
from critique_core.config import DEFAULT_CONFIG

log = logging.getLogger(__name__)


def verify_recipient(address: Any, scam_addresses: Iterable[str] = DEFAULT_CONFIG.malicious_addresses) -> bool:
    """Only a non-empty string address outside the scam list verifies."""
    if not isinstance(address, str) or not address:
        return False
    return address not in set(scam_addresses)


def respond(car: Optional[CarContext], scam_addresses: Iterable[str] = DEFAULT_CONFIG.malicious_addresses) -> dict[str, Any]:
    """Build the agent's reply for one turn from the critique context."""
    if car is None:
        return {"message": "No critique available for this input.", "deferred": True}

    if car.error is not None:
        return {"message": f"An error occurred: {car.error}", "deferred": True}

    if car.deferred:
        return {"message": f"I need human guidance: {car.defer_reason}", "explanation": car.explanation}

    action = car.result.primary_action if car.result is not None else None
    if action is None:
        return {
            "message": (
                "I've processed your request, but no actions were approved. "
                "Please provide more information or clarify your request."
            ),
            "limitations": list(car.result.limitations) if car.result else [],
            "uncertainties": list(car.result.uncertainties) if car.result else [],
        }

    params = action.params
    reply: dict[str, Any] = {"explanation": car.explanation, "action": action.model_dump()}
    if action.action == "executeTransaction":
        log.info("Executing transaction to %s with value %s", params.get("to"), params.get("value"))
        reply["message"] = (
            f"Transaction executed successfully to {params.get('to')} with value {params.get('value')}"
        )
    elif action.action == "respondToMessage":
        reply["message"] = params.get("content", "")
    elif action.action == "monitorTransaction":
        log.info("Monitoring transaction %s", params.get("txHash"))
        reply["message"] = f"Transaction monitoring set up for {params.get('txHash')}"
    elif action.action == "verifyRecipient":
        address = params.get("address")
        if address is None:
            reply["message"] = "Recipient verification failed: no recipient address"
        elif verify_recipient(address, scam_addresses):
            reply["message"] = f"Recipient verified: {address}"
        else:
            reply["message"] = f"Recipient verification failed: {address}"
    else:
        reply["message"] = f"Executing unrecognized action: {action.action}"
    return reply


async def run_agent_turn(
    extension: CritiqueExtension, event: Any, context: Optional[dict[str, Any]] = None
) -> tuple[CarContext, dict[str, Any]]:
    """Run one full turn: critique, respond, then let the extension rewrite the reply."""
    ctx = await extension.before_run(event, context)
    car = ctx[CONTEXT_KEY]
    reply = respond(car, extension.pipeline.config.malicious_addresses)
    return car, await extension.after_run(event, reply, ctx)
