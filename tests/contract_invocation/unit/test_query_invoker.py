"""Query invoker tests."""

from __future__ import annotations

import pytest
from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_invocation.query_invoker import (
    QueryError,
    QueryInvoker,
    is_error_response,
)
from contract_e2e_tester.contract_messages.metadata_models import Extension, Metadata
from contract_e2e_tester.contract_messages.nft_messages import NftInfo, decode_nft_info
from contract_e2e_tester.network_client.chain_client import ChainQueryRejected
from contract_e2e_tester.network_client.client_models import ClientContext

CONTRACT = DeployedContract(code_id=1, code_hash="nfthash", address="secret1nft", label="nft1")


class _QueryChain:
    def __init__(self, answer=None, error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.calls: list[tuple] = []

    def query(self, contract_hash, contract_address, query):
        self.calls.append((contract_hash, contract_address, query))
        if self.error is not None:
            raise self.error
        return self.answer


def _invoker(chain: _QueryChain) -> QueryInvoker:
    return QueryInvoker(ClientContext("secret1me", "http://x", "secretdev-1", chain=chain))


def test_query_returns_answer_and_sends_code_hash() -> None:
    chain = _QueryChain(answer={"nft_info": {"extension": {"name": "test name"}}})

    metadata = _invoker(chain).query_as(CONTRACT, NftInfo(token_id="001"), decode_nft_info)

    assert metadata == Metadata(extension=Extension(name="test name"))
    assert chain.calls == [("nfthash", "secret1nft", {"nft_info": {"token_id": "001"}})]


def test_query_parses_json_text_answers() -> None:
    chain = _QueryChain(answer='{"nft_info": {}}')

    assert _invoker(chain).query(CONTRACT, NftInfo(token_id="001")) == {"nft_info": {}}


@pytest.mark.parametrize(
    "answer",
    [
        {"generic_err": {"msg": "Wrong viewing key for this address or viewing key not set"}},
        {"unauthorized": {}},
        '{"viewing_key_error": {"msg": "wrong key"}}',
    ],
)
def test_error_answers_raise_query_error(answer) -> None:
    chain = _QueryChain(answer=answer)

    with pytest.raises(QueryError, match="failed with the following err"):
        _invoker(chain).query(CONTRACT, NftInfo(token_id="001"))


def test_rejected_query_is_wrapped() -> None:
    chain = _QueryChain(error=ChainQueryRejected("contract not found"))

    with pytest.raises(QueryError, match="contract not found"):
        _invoker(chain).query(CONTRACT, NftInfo(token_id="001"))


def test_non_json_text_answer_raises() -> None:
    chain = _QueryChain(answer="Error parsing into type")

    with pytest.raises(QueryError, match="non-JSON answer"):
        _invoker(chain).query(CONTRACT, NftInfo(token_id="001"))


def test_unexpected_answer_shape_raises_query_error() -> None:
    chain = _QueryChain(answer={"token_list": {"tokens": []}})

    with pytest.raises(QueryError, match="Unexpected answer shape"):
        _invoker(chain).query_as(CONTRACT, NftInfo(token_id="001"), decode_nft_info)


def test_error_detection_is_structural() -> None:
    assert is_error_response({"generic_err": {}}) is True
    assert is_error_response({"nft_info": {"extension": {"description": "err\""}}}) is False
    assert is_error_response({"generic_err": {}, "nft_info": {}}) is False
    assert is_error_response("generic_err") is False
