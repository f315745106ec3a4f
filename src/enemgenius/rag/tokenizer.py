"""Portuguese-aware tokenization for term-frequency retrieval."""

import re
import unicodedata

PORTUGUESE_STOP_WORDS = frozenset(
    {
        "de", "a", "o", "que", "e", "do", "da", "em", "um", "para", "é", "com", "não", "uma",
        "os", "no", "na", "por", "mais", "as", "dos", "como", "mas", "foi", "ao", "ele",
        "das", "tem", "à", "seu", "sua", "ou", "ser", "quando", "muito", "há", "nos", "já",
        "está", "eu", "também", "só", "pelo", "pela", "até", "isso", "ela", "entre", "era",
        "depois", "sem", "mesmo", "aos", "ter", "seus", "quem", "nas", "me", "esse", "eles",
        "estão", "você", "tinha", "foram", "essa", "num", "nem", "suas", "meu", "às", "minha",
        "têm", "numa", "pelos", "elas", "havia", "seja", "qual", "será", "nós", "tenho",
        "lhe", "deles", "essas", "esses", "pelas", "este", "fosse", "dele", "tu", "te",
        "vocês", "vos", "lhes", "meus", "minhas", "teu", "tua", "teus", "tuas", "nosso",
        "nossa", "nossos", "nossas", "dela", "delas", "esta", "estes", "estas", "aquele",
        "aquela", "aqueles", "aquelas", "isto", "aquilo", "estou", "estamos",
        "estive", "esteve", "estivemos", "estiveram", "estava", "estávamos", "estavam",
        "estivera", "estivéramos", "esteja", "estejamos", "estejam", "estivesse", "estivéssemos",
        "estivessem", "estiver", "estivermos", "estiverem", "hei", "havemos", "hão",
        "houve", "houvemos", "houveram", "houvera", "houvéramos", "haja", "hajamos", "hajam",
        "houvesse", "houvéssemos", "houvessem", "houver", "houvermos", "houverem", "houverei",
        "houverá", "houveremos", "houverão", "houveria", "houveríamos", "houveriam", "sou",
        "somos", "são", "éramos", "eram", "fui", "fomos", "fora",
        "fôramos", "sejamos", "sejam", "fôssemos", "fossem", "for", "formos",
        "forem", "serei", "seremos", "serão", "seria", "seríamos", "seriam",
        "temos", "tém", "tínhamos", "tinham", "tive", "teve", "tivemos",
        "tiveram", "tivera", "tivéramos", "tenha", "tenhamos", "tenham", "tivesse",
        "tivéssemos", "tivessem", "tiver", "tivermos", "tiverem", "terei", "terá",
        "teremos", "terão", "teria", "teríamos", "teriam",
    }
)

MIN_TOKEN_LENGTH = 3

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
# Word characters are the ASCII set; whitespace stays Unicode-aware.
_NON_WORD = re.compile(r"[^0-9A-Za-z_\s]")


def normalize(text: str) -> str:
    """Lower-case text and strip accents and punctuation.

    Args:
        text: Raw text

    Returns:
        str: Text with combining marks and non-word characters removed
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    return _NON_WORD.sub("", _COMBINING_MARKS.sub("", decomposed))


# Tokens are accent-stripped before the stop-word check, so the set is too.
NORMALIZED_STOP_WORDS = frozenset(normalize(word) for word in PORTUGUESE_STOP_WORDS)


def tokenize(text: str | None) -> list[str]:
    """Split text into content-bearing terms.

    Terms keep their left-to-right order and duplicates are retained. Tokens
    of two characters or fewer and Portuguese stop-words are discarded.

    Args:
        text: Raw text (None and empty strings yield no terms)

    Returns:
        list[str]: Normalized terms
    """
    if not text:
        return []

    return [
        token
        for token in normalize(text).split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in NORMALIZED_STOP_WORDS
    ]
