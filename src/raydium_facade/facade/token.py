"""Token catalog built from the Raydium and external token lists."""

import logging
from collections.abc import Callable

from raydium_facade.core.config import JupTokenType
from raydium_facade.core.models import ApiV3Token, TokenListV3

logger = logging.getLogger(__name__)


class TokenModule:
    """
    Merged token catalog keyed by mint address.

    Raydium entries take precedence over external ones and blacklisted mints
    are left out.

    Parameters
    ----------
    token_list_v3 : Callable[[bool], TokenListV3]
        Read-through accessor of the Raydium v3 list
    external_token_list : Callable[[bool], list[ApiV3Token]]
        Read-through accessor of the external list
    jup_token_type : JupTokenType
        External list variant; 'none' skips the external list

    """

    def __init__(
        self,
        token_list_v3: Callable[[bool], TokenListV3],
        external_token_list: Callable[[bool], list[ApiV3Token]],
        jup_token_type: JupTokenType = JupTokenType.STRICT,
    ) -> None:
        self._token_list_v3 = token_list_v3
        self._external_token_list = external_token_list
        self.jup_token_type = jup_token_type
        self.token_map: dict[str, ApiV3Token] = {}
        self.whitelist: set[str] = set()
        self.blacklist: set[str] = set()
        self.mint_group: dict[str, set[str]] = {"official": set(), "jup": set()}

    def load(self, force_refresh: bool = False) -> dict[str, ApiV3Token]:
        """
        Rebuild the catalog from the token lists.

        Parameters
        ----------
        force_refresh : bool
            Refetch both lists regardless of their freshness

        Returns
        -------
        dict[str, ApiV3Token]
            Mint address to token

        """
        raydium_list = self._token_list_v3(force_refresh)
        external = []
        if self.jup_token_type is not JupTokenType.NONE:
            external = self._external_token_list(force_refresh)

        blacklist = set(raydium_list.blacklist)
        token_map: dict[str, ApiV3Token] = {}
        for token in external:
            if token.address not in blacklist:
                token_map[token.address] = token
        for token in raydium_list.mint_list:
            if token.address not in blacklist:
                token_map[token.address] = token

        self.token_map = token_map
        self.blacklist = blacklist
        self.whitelist = set(raydium_list.white_list)
        self.mint_group = {
            "official": {t.address for t in raydium_list.mint_list} - blacklist,
            "jup": {t.address for t in external} - blacklist,
        }
        logger.debug(
            "Loaded %d tokens (%d official, %d external)",
            len(token_map),
            len(self.mint_group["official"]),
            len(self.mint_group["jup"]),
        )
        return token_map

    def get_token_info(self, mint: str) -> ApiV3Token | None:
        """Return the catalog entry for a mint, or None if unknown."""
        return self.token_map.get(mint)
