# providers/schemas.py
"""
Upstream payload shapes, one group per provider family.

Only the fields the normalizers read are declared; anything else the
explorers send is ignored. A payload that does not fit its model is reported
as MalformedResponseError instead of leaking None/NaN into the domain model.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from common.errors import MalformedResponseError


def _float_via_repr(v: Any) -> Any:
    # JSON floats keep their shortest repr, 0.1 stays 0.1 rather than its binary expansion
    if isinstance(v, float):
        return repr(v)
    return v


Amount = Annotated[Decimal, BeforeValidator(_float_via_repr)]


class RawModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


M = TypeVar("M", bound=RawModel)


def parse_payload(model: Type[M], data: Any, url: Optional[str] = None) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"{model.__name__}: {e.error_count()} invalid field(s): {e}", url=url
        ) from e


# general UTXO (SoChain v2)

class SochainInput(RawModel):
    address: Optional[str] = None


class SochainIncoming(RawModel):
    value: Amount
    inputs: List[SochainInput] = Field(default_factory=list)


class SochainOutput(RawModel):
    address: Optional[str] = None
    value: Amount


class SochainOutgoing(RawModel):
    outputs: List[SochainOutput] = Field(default_factory=list)


class SochainTx(RawModel):
    txid: str
    block_no: Optional[int] = None
    time: int
    incoming: Optional[SochainIncoming] = None
    outgoing: Optional[SochainOutgoing] = None


class SochainAddressData(RawModel):
    total_txs: int
    received_value: Amount
    balance: Amount
    txs: List[SochainTx]


class SochainAddressResponse(RawModel):
    data: SochainAddressData


# Bitcoin Cash (rest.bitcoin.com v2)

class BchInput(RawModel):
    addr: Optional[str] = None


class BchScriptPubKey(RawModel):
    addresses: Optional[List[str]] = None


class BchOutput(RawModel):
    value: Amount
    scriptPubKey: BchScriptPubKey = BchScriptPubKey()


class BchTx(RawModel):
    txid: str
    blockheight: Optional[int] = None
    time: int
    vin: List[BchInput] = Field(default_factory=list)
    vout: List[BchOutput] = Field(default_factory=list)


class BchDetails(RawModel):
    balance: Amount
    totalReceived: Amount
    totalSent: Amount
    # sic, upstream spelling
    txApperances: int


class BchTransactionsPage(RawModel):
    pagesTotal: int = Field(ge=0)
    txs: List[BchTx]


# account based (BlockCypher)

class TxRef(RawModel):
    tx_hash: str
    block_height: Optional[int] = None
    value: Amount
    tx_input_n: int
    tx_output_n: int
    confirmed: str
    # fee inclusive value, attached after the txs lookup for sent references
    total: Optional[Amount] = None


class AccountSummary(RawModel):
    n_tx: int
    total_received: Amount
    total_sent: Amount
    balance: Amount
    txrefs: List[TxRef] = Field(default_factory=list)


class AccountTransaction(RawModel):
    total: Amount
