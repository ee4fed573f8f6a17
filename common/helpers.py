import json
import logging
from typing import Any, Dict, List, Tuple


LOG_FORMAT = '[%(asctime)s.%(msecs)03d] %(levelname)s:%(name)s %(message)s | %(pathname)s:%(lineno)d'
LOG_DATEFMT = '%Y%m%d,%H:%M:%S'


def setup_logging(level=logging.INFO):
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


def normalize_bytecode(bytecode) -> str:
    """
    Compilers emit bytecode as a bare hex string or as {'object': hex}, with or without the 0x prefix
    """
    if isinstance(bytecode, dict):
        bytecode = bytecode.get('object')
    if not isinstance(bytecode, str) or len(bytecode) == 0:
        raise ValueError(f'Bytecode missing or in an unknown format: {bytecode!r}')
    return bytecode if bytecode.startswith('0x') else f'0x{bytecode}'


def load_artifact(artifact_path) -> Tuple[List[Dict[str, Any]], str]:
    '''
    Returns (abi, bytecode) from a compiled contract artifact JSON file
    '''
    with open(artifact_path, 'r') as a:
        artifact = json.load(a)
    return artifact['abi'], normalize_bytecode(artifact.get('bytecode'))
