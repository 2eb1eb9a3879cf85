"""
On-chain fee reference

Ground truth for validating reconstructed fees: a static call of
NonfungiblePositionManager.collect() from the position owner, which returns
everything collectable (tokensOwed + uncollected fees) at a given block
without sending a transaction.
"""

import logging
from typing import Optional

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from ..config import settings
from ..constants import UINT128_MAX
from ..exceptions import ReferenceCallError
from .types import TokenFeeAmount

logger = logging.getLogger(__name__)

COLLECT_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "uint256", "name": "tokenId", "type": "uint256"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint128", "name": "amount0Max", "type": "uint128"},
                    {"internalType": "uint128", "name": "amount1Max", "type": "uint128"},
                ],
                "internalType": "struct INonfungiblePositionManager.CollectParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "collect",
        "outputs": [
            {"internalType": "uint256", "name": "amount0", "type": "uint256"},
            {"internalType": "uint256", "name": "amount1", "type": "uint256"},
        ],
        "stateMutability": "payable",
        "type": "function",
    }
]


class PositionFeesReference:
    """Collectable fees of a position read from the contract

    Usage:
        reference = PositionFeesReference(rpc_url="https://...")
        fees = reference.get_position_fees("34054", owner, block=latest_indexed_block)
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        position_manager_address: Optional[str] = None,
        w3: Optional[Web3] = None
    ):
        """
        Args:
            rpc_url: JSON-RPC endpoint. Falls back to JSON_RPC_URL
            position_manager_address: NonfungiblePositionManager address
            w3: preconfigured Web3 instance (rpc_url is then ignored)
        """
        if w3 is None:
            rpc_url = rpc_url or settings.JSON_RPC_URL
            if not rpc_url:
                raise ReferenceCallError("JSON_RPC_URL is not set and no rpc_url was given")
            w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": settings.REQUEST_TIMEOUT}))

        self.w3 = w3
        address = position_manager_address or settings.POSITION_MANAGER_ADDRESS
        self.position_manager = w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=COLLECT_ABI,
        )

    def get_position_fees(
        self,
        token_id: str,
        owner: str,
        block: Optional[int] = None
    ) -> TokenFeeAmount:
        """Static collect() as the owner at a block

        Args:
            token_id: position NFT id
            owner: position owner (also the recipient; some tokens
                revert on transfers to the zero address)
            block: block number, latest when None

        Returns:
            TokenFeeAmount

        Raises:
            ReferenceCallError: the call reverted or the node was unreachable
        """
        owner = Web3.to_checksum_address(owner)
        params = (int(token_id), owner, UINT128_MAX, UINT128_MAX)
        block_identifier = block if block is not None else "latest"

        try:
            amount0, amount1 = self.position_manager.functions.collect(params).call(
                {"from": owner}, block_identifier=block_identifier
            )
        except (Web3Exception, requests.exceptions.RequestException, ValueError) as e:
            raise ReferenceCallError(f"collect() call for position {token_id} failed: {e}") from e

        logger.debug("Reference fees for position %s at %s: %d, %d",
                     token_id, block_identifier, amount0, amount1)
        return TokenFeeAmount(int(amount0), int(amount1))
