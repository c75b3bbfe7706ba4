# kilo/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Turns the raw byte stream coming from the terminal into logical keys and
logical keys into editor actions.

Key Features:
- `Key` names the keys the editor understands; plain bytes keep their own
  value, multi-byte escape sequences get symbolic values above 255.
- `read_key()` blocks on bounded-timeout reads until a key arrives and decodes
  the VT100 sequences for arrows, Home/End, Delete and Page Up/Down.
- Bindings come from the ``[keybindings]`` config table as key specs
  (``"ctrl+q"``, ``"pageup"``, ``["backspace", "ctrl+h"]``).
- Bytes that are not bound and are not control bytes are inserted as text.

Main Methods:
1. handle_input: Dispatches one key to its bound action or inserts it.
2. get_key_input: Reads one decoded key from the editor's terminal.
3. _load_keybindings: Resolves the configured key specs into key codes.
4. _decode_keystring: Decodes one key spec into a key code.
5. _setup_action_map: Builds the key code -> editor method mapping.
6. lookup: Reverse lookup from a key spec to its action name.
"""

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from kilo.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


class Key(IntEnum):
    """Logical keys. Single-byte keys keep their byte value."""

    TAB = 9
    ENTER = 13
    ESC = 27
    BACKSPACE = 127
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl_key(ch: str) -> int:
    """Byte produced by Ctrl+<ch>, e.g. ``ctrl_key("q") == 17``."""
    return ord(ch) & 0x1F


class ByteSource(Protocol):
    def read_byte(self) -> Optional[int]: ...


# ESC [ <letter>
CSI_LETTER_MAP: dict[int, Key] = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

# ESC [ <digit> ~
CSI_TILDE_MAP: dict[int, Key] = {
    ord("1"): Key.HOME,
    ord("3"): Key.DEL,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}

# ESC O <letter>
SS3_MAP: dict[int, Key] = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

NAMED_KEYS: dict[str, int] = {
    "up": Key.ARROW_UP,
    "down": Key.ARROW_DOWN,
    "left": Key.ARROW_LEFT,
    "right": Key.ARROW_RIGHT,
    "home": Key.HOME,
    "end": Key.END,
    "pageup": Key.PAGE_UP,
    "pgup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "pgdn": Key.PAGE_DOWN,
    "del": Key.DEL,
    "delete": Key.DEL,
    "backspace": Key.BACKSPACE,
    "enter": Key.ENTER,
    "return": Key.ENTER,
    "tab": Key.TAB,
    "esc": Key.ESC,
    "escape": Key.ESC,
    "space": ord(" "),
}


def key_name(key: int) -> str:
    """Human-readable name of a decoded key, used for tracing."""
    try:
        return Key(key).name
    except ValueError:
        pass
    if key < 32:
        return f"CTRL-{chr(key + 64)}"
    if key < 127:
        return repr(chr(key))
    return f"0x{key:02x}"


def read_key(source: ByteSource, idle: Optional[Callable[[], None]] = None) -> int:
    """Blocks until one key is available and returns it decoded.

    A lone ESC, a sequence cut short by a read timeout and any sequence that
    is not recognised all come back as `Key.ESC`. `idle` runs after every
    read that timed out while waiting for the first byte.
    """
    while True:
        byte = source.read_byte()
        if byte is not None:
            break
        if idle is not None:
            idle()

    key = byte
    if byte == Key.ESC:
        key = _decode_escape(source)

    KEY_LOGGER.debug("key %d (%s)", key, key_name(key))
    return key


def _decode_escape(source: ByteSource) -> int:
    first = source.read_byte()
    if first is None:
        return Key.ESC
    second = source.read_byte()
    if second is None:
        return Key.ESC

    if first == ord("["):
        if ord("0") <= second <= ord("9"):
            third = source.read_byte()
            if third == ord("~") and second in CSI_TILDE_MAP:
                return CSI_TILDE_MAP[second]
            logging.debug("read_key: unknown sequence ESC [ %r %r", chr(second), third)
            return Key.ESC
        if second in CSI_LETTER_MAP:
            return CSI_LETTER_MAP[second]
    elif first == ord("O") and second in SS3_MAP:
        return SS3_MAP[second]

    logging.debug("read_key: unknown sequence ESC %r %r", chr(first), chr(second))
    return Key.ESC


def is_insertable(key: int) -> bool:
    """True for bytes typed as text: TAB and every non-control byte."""
    return key == Key.TAB or (32 <= key < 256 and key != Key.BACKSPACE)


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Maps decoded keys to editor actions.

    Attributes:
        editor (Kilo): Editor whose methods the actions call.
        config (dict): Merged application configuration.
        keybindings (dict[str, list[int]]): Action name -> bound key codes.
        action_map (dict[int, Callable]): Key code -> editor method.
    """

    # Action name (config) -> editor method name.
    ACTION_METHODS: dict[str, str] = {
        "quit": "exit_editor",
        "save_file": "save_file",
        "find": "find",
        "handle_up": "handle_up",
        "handle_down": "handle_down",
        "handle_left": "handle_left",
        "handle_right": "handle_right",
        "handle_home": "handle_home",
        "handle_end": "handle_end",
        "handle_page_up": "handle_page_up",
        "handle_page_down": "handle_page_down",
        "handle_enter": "handle_enter",
        "handle_backspace": "handle_backspace",
        "handle_delete": "handle_delete",
        "redraw": "redraw",
    }

    def __init__(self, editor: "Kilo"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: int) -> bool:
        """Processes a single key.

        Bound keys call their action; insertable bytes are typed into the
        document; other control bytes are ignored.

        Returns:
            bool: True if the key changed something on screen.
        """
        action = self.action_map.get(key)
        if action is not None:
            logging.debug("handle_input: %s -> %s", key_name(key), action.__name__)
            return bool(action())
        if is_insertable(key):
            return self.editor.insert_char(key)
        logging.debug("handle_input: ignoring unbound key %s", key_name(key))
        return False

    def get_key_input(self) -> int:
        return read_key(self.editor.terminal, idle=self.editor.poll_resize)

    def action_name(self, key: int) -> Optional[str]:
        """Name of the action a decoded key dispatches to, if any."""
        method = self.action_map.get(key)
        if method is None:
            return None
        for action, method_name in self.ACTION_METHODS.items():
            if method_name == method.__name__:
                return action
        return None

    def _load_keybindings(self) -> dict[str, list[int]]:
        """Resolves ``[keybindings]`` into action name -> key codes.

        A value may be a single spec, a list of specs or a ``|``-separated
        string. Specs that fail to parse are logged and skipped; an action
        with an empty value is left unbound.
        """
        user_keybindings = self.config.get("keybindings", {})
        if not isinstance(user_keybindings, dict):
            logging.error("[keybindings] must be a table, got %r; no keys bound.", user_keybindings)
            return {}
        parsed: dict[str, list[int]] = {}

        for action, value in user_keybindings.items():
            if not value:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            if isinstance(value, list):
                specs = value
            elif isinstance(value, str) and "|" in value:
                specs = [s.strip() for s in value.split("|")]
            else:
                specs = [value]

            codes: list[int] = []
            for spec in specs:
                try:
                    code = self._decode_keystring(spec)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding %r for action %r: %s. Binding ignored.",
                        spec, action, e,
                    )
                    continue
                if code not in codes:
                    codes.append(code)

            if codes:
                parsed[action] = codes
            else:
                logging.warning("No valid keys for action %r; it will not be bound.", action)

        logging.debug("Loaded keybindings: %s", parsed)
        return parsed

    def _decode_keystring(self, key_input: str | int) -> int:
        """Decodes a key spec (``"ctrl+s"``, ``"pageup"``, ``"x"`` or an int).

        Raises:
            ValueError: If the spec names an unknown key or modifier.
        """
        if isinstance(key_input, bool) or not isinstance(key_input, (str, int)):
            raise ValueError(f"Invalid key spec type: {type(key_input).__name__}")
        if isinstance(key_input, int):
            return key_input

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")
        if s in NAMED_KEYS:
            return int(NAMED_KEYS[s])

        parts = s.split("+")
        base = parts[-1]
        modifiers = set(parts[:-1])

        if modifiers == {"ctrl"}:
            if len(base) == 1 and "a" <= base <= "z":
                return ctrl_key(base)
            raise ValueError(f"Unsupported Ctrl combination '{key_input}'")
        if modifiers:
            raise ValueError(f"Unknown modifiers {sorted(modifiers)} in '{key_input}'")
        if len(base) == 1:
            return ord(base)
        raise ValueError(f"Unknown key '{key_input}'")

    def _setup_action_map(self) -> dict[int, Callable[[], Any]]:
        """Builds key code -> editor method from the loaded keybindings."""
        action_map: dict[int, Callable[[], Any]] = {}
        for action, codes in self.keybindings.items():
            method_name = self.ACTION_METHODS.get(action)
            method = getattr(self.editor, method_name, None) if method_name else None
            if method is None:
                logging.warning(
                    "Action '%s' in keybindings has no corresponding method. Ignored.", action
                )
                continue
            for code in codes:
                if code in action_map and action_map[code].__name__ != method.__name__:
                    logging.warning(
                        "Keybinding for '%s' (key %s) overrides '%s'.",
                        action, key_name(code), action_map[code].__name__,
                    )
                action_map[code] = method

        logging.debug(
            "Final constructed action map: %s",
            {key_name(k): v.__name__ for k, v in action_map.items()},
        )
        return action_map

    def lookup(self, key_spec: str | int) -> Optional[str]:
        """Returns the action bound to a key spec, or None."""
        try:
            code = self._decode_keystring(key_spec)
        except ValueError:
            return None
        return self.action_name(code)
