__all__ = [
    # Config
    "ChainConfig",
    "load_config",
    # Errors
    "CardDrawError",
    "ConfigError",
    "RecordError",
    "ValidationError",
    "UnknownCardError",
    "UnknownRarityError",
    "ChainError",
    "RpcError",
    "TransactionRevertedError",
    "ReceiptTimeoutError",
    "EventDecodingError",
    "EventNotFoundError",
    "DuplicateEventError",
    "MetadataNotSetError",
    # Records
    "DeploymentRecord",
    "load_deployment",
    "write_deployment",
    "CardCatalog",
    "CardMetadata",
    "load_catalog",
    "Rarity",
    "rarity_code",
    # Chain
    "RpcClient",
    "CardContract",
    "CardDetails",
    "DecodedEvent",
    "decode_log",
    "decode_receipt",
    "find_single_event",
    # Workflows
    "deploy",
    "draw_card",
    "mint_card",
    "DrawResult",
    "MintResult",
]

from .config import ChainConfig, load_config
from .errors import (
    CardDrawError,
    ChainError,
    ConfigError,
    DuplicateEventError,
    EventDecodingError,
    EventNotFoundError,
    MetadataNotSetError,
    ReceiptTimeoutError,
    RecordError,
    RpcError,
    TransactionRevertedError,
    UnknownCardError,
    UnknownRarityError,
    ValidationError,
)
from .rarity import Rarity, rarity_code
from .records.catalog import CardCatalog, CardMetadata, load_catalog
from .records.deployment import DeploymentRecord, load_deployment, write_deployment
from .chain.rpc import RpcClient
from .chain.events import DecodedEvent, decode_log, decode_receipt, find_single_event
from .contract import CardContract, CardDetails
from .workflows.deploy import deploy
from .workflows.draw import DrawResult, draw_card
from .workflows.mint import MintResult, mint_card
