"""
Calldata decoding for the call shapes a payment operation may carry.

Only two shapes are recognized, keyed by the 4-byte selector:

* ``transfer(address,uint256)``: a direct ERC-20 transfer
* ``execute(address,uint256,bytes)``: a smart-account call wrapping another call

The wrapped call inside ``execute`` is not decoded, so an operation that pays
through ``execute`` carries no transfer as far as the facilitator is concerned.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Union

from x402_gasless.abi import (
    ADDRESS_HEX_LENGTH,
    EXECUTE_SELECTOR,
    SELECTOR_HEX_LENGTH,
    TRANSFER_SELECTOR,
    WORD_HEX_LENGTH,
)
from x402_gasless.types import UserOperation
from x402_gasless.utils.hexstr import is_hex_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferClaim:
    """Recipient and amount extracted from a transfer call"""

    recipient: str  # lowercase 0x address
    amount: int


@dataclass(frozen=True)
class TransferCall:
    recipient: str
    amount: int


@dataclass(frozen=True)
class ExecuteCall:
    target: str
    value: int


@dataclass(frozen=True)
class UnknownCall:
    selector: str | None


DecodedCall = Union[TransferCall, ExecuteCall, UnknownCall]


def _words(params: str, count: int) -> list[str] | None:
    """Split the first *count* 32-byte words out of a hex parameter blob"""
    if len(params) < count * WORD_HEX_LENGTH:
        return None
    return [params[i * WORD_HEX_LENGTH : (i + 1) * WORD_HEX_LENGTH] for i in range(count)]


def _word_to_address(word: str) -> str:
    return "0x" + word[-ADDRESS_HEX_LENGTH:].lower()


def _decode_transfer(params: str) -> DecodedCall:
    words = _words(params, 2)
    if words is None:
        return UnknownCall(TRANSFER_SELECTOR)
    return TransferCall(recipient=_word_to_address(words[0]), amount=int(words[1], 16))


def _decode_execute(params: str) -> DecodedCall:
    # Slot 2 is the offset of the inner call bytes; it is left unresolved.
    words = _words(params, 3)
    if words is None:
        return UnknownCall(EXECUTE_SELECTOR)
    return ExecuteCall(target=_word_to_address(words[0]), value=int(words[1], 16))


_DECODERS: dict[str, Callable[[str], DecodedCall]] = {
    TRANSFER_SELECTOR: _decode_transfer,
    EXECUTE_SELECTOR: _decode_execute,
}


def decode_call(call_data: str) -> DecodedCall:
    """Classify *call_data* into one of the known call shapes.

    Never raises: anything that cannot be fully decoded is an ``UnknownCall``.
    """
    if not is_hex_string(call_data) or len(call_data) < 2 + SELECTOR_HEX_LENGTH:
        return UnknownCall(None)

    selector = call_data[: 2 + SELECTOR_HEX_LENGTH].lower()
    decoder = _DECODERS.get(selector)
    if decoder is None:
        return UnknownCall(selector)
    return decoder(call_data[2 + SELECTOR_HEX_LENGTH :])


def extract_transfer(operation: UserOperation) -> TransferClaim | None:
    """Extract the transfer claim from an operation, or None if there is none"""
    call = decode_call(operation.call_data)

    if isinstance(call, TransferCall):
        return TransferClaim(recipient=call.recipient, amount=call.amount)

    if isinstance(call, ExecuteCall):
        logger.debug(
            "execute() call to %s not resolved; nested calls are not decoded", call.target
        )
    return None
