"""urlvalue.grammar
Character-level rules shared by the absolutizer and the media-type parser.
Each rule is from RFC 3986, 5234, 2045 or 822.
"""

# ALPHA = %x41-5A / %x61-7A
ALPHA: str = r"[A-Za-z]"

# DIGIT = %x30-39
DIGIT: str = r"[0-9]"

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
HEXDIG: str = rf"(?:{DIGIT}|[A-Fa-f])"

# pct-encoded = "%" HEXDIG HEXDIG
PCT_ENCODED: str = rf"%{HEXDIG}{HEXDIG}"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
SCHEME: str = rf"(?P<scheme>{ALPHA}(?:{ALPHA}|{DIGIT}|[+\-.])*)"

# tspecials = "(" / ")" / "<" / ">" / "@" / "," / ";" / ":" / "\" / <"> / "/" / "[" / "]" / "?" / "="
# token = 1*<any (US-ASCII) CHAR except SPACE, CTLs, or tspecials>
TOKEN: str = r"[!#$%&'*+\-.^_`{|}~0-9A-Za-z]+"

# C0 control or space, stripped from both ends of URL text before parsing.
C0_CONTROL_OR_SPACE: str = r"[\x00-\x20]"

# ASCII tab or newline, removed from anywhere in URL text before parsing.
ASCII_TAB_OR_NEWLINE: str = r"[\t\n\r]"
