from common.exceptions import RegistryCorrupt
from common.helpers import setup_logging

from dataclasses import asdict, dataclass
import json
import logging
from typing import Any, Dict, Iterable, List


setup_logging()


@dataclass(frozen=True)
class TokenDescriptor:
    address: str
    symbol: str = ''
    name: str = ''
    decimals: int = 18

    @staticmethod
    def create_from_dict(d: Dict[str, Any]):
        return TokenDescriptor(
            address=(d.get('address') or '').strip(),
            symbol=d.get('symbol') or '',
            name=d.get('name') or '',
            decimals=int(d.get('decimals', 18)),
        )

    def dump(self):
        return asdict(self)

    def __repr__(self):
        return f'{self.symbol or "?"} {self.name} @ {self.address}'.strip()


class TokenRegistry:
    """
    Operator-curated list of known tokens, stored as a JSON array. The address is the
    unique key, compared case-insensitively. Insertion order is kept since routing
    tries intermediate tokens in that order
    """
    def __init__(self, tokens_path):
        self.tokens_path = tokens_path

    def _load_entries(self) -> List[Any]:
        '''
        Raw JSON entries, malformed ones included. A missing file is an empty list, a file
        that is not a readable JSON array raises RegistryCorrupt
        '''
        try:
            with open(self.tokens_path, 'r') as f:
                entries = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            raise RegistryCorrupt(self.tokens_path, e)
        if not isinstance(entries, list):
            raise RegistryCorrupt(self.tokens_path, f'expected a JSON array, got {type(entries).__name__}')
        return entries

    def list(self) -> List[TokenDescriptor]:
        try:
            entries = self._load_entries()
        except RegistryCorrupt as e:
            # Unreadable storage is treated as an empty registry
            logging.warning(f'{e}, treating it as empty')
            return []
        tokens = []
        for i, entry in enumerate(entries):
            try:
                tokens.append(TokenDescriptor.create_from_dict(entry))
            except (ValueError, TypeError, AttributeError) as e:
                logging.warning(f'Skipping malformed token registry entry {i} ({entry!r}): {e}')
        return tokens

    def upsert(self, entry: TokenDescriptor):
        '''
        Edits the stored entries in place, entries that fail to parse are written back untouched.
        Raises RegistryCorrupt instead of overwriting a file it cannot read
        '''
        entries = self._load_entries()
        address = entry.address.lower()
        for i, stored in enumerate(entries):
            if isinstance(stored, dict) and str(stored.get('address') or '').strip().lower() == address:
                entries[i] = {**stored, **entry.dump()}
                break
        else:
            entries.append(entry.dump())
        self._save(entries)
        logging.info(f'Registered token {entry}')

    def candidate_addresses(self, exclude: Iterable[str] = ()) -> List[str]:
        '''
        Lower-cased registry addresses, de-duplicated, first occurrence wins, minus exclude
        '''
        excluded = {a.lower() for a in exclude}
        seen = set()
        candidates = []
        for token in self.list():
            address = token.address.lower()
            if not address or address in excluded or address in seen:
                continue
            seen.add(address)
            candidates.append(address)
        return candidates

    def _save(self, entries: List[Any]):
        with open(self.tokens_path, 'w') as f:
            json.dump(entries, f, indent=2)
