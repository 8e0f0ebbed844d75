"""
Symbol Tables

Static lookup tables used when preparing course content for print:

- EMOJI_SEQUENCES: emoji grapheme clusters, longest first, loaded from
  data/emoji_sequences.txt when the module is imported
- MATH_MACROS: single Unicode math characters and their TeX macros

Both tables are immutable once built and are shared by every export run.
A malformed data file fails the import instead of the first export.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Tuple

from .errors import SymbolTableError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'
EMOJI_DATA_FILE = DATA_DIR / 'emoji_sequences.txt'

# Dropped from asset keys: the image is the same with or without them.
VARIATION_SELECTORS = frozenset('\ufe0e\ufe0f')


# =============================================================================
# Emoji
# =============================================================================

def emoji_key(cluster: str) -> str:
    """
    Build the asset key for an emoji cluster.

    Every code point is written as lowercase hex (at least four digits)
    and the values are joined with underscores. Variation selectors are
    left out; zero-width joiners and skin-tone modifiers are kept.

    Example:
        >>> emoji_key('\\u2764\\ufe0f\\u200d\\U0001F525')
        '2764_200d_1f525'
    """
    return '_'.join(
        f'{ord(char):04x}' for char in cluster if char not in VARIATION_SELECTORS
    )


def emoji_asset_name(cluster: str) -> str:
    """File name of the image asset for an emoji cluster."""
    return f'emoji_u{emoji_key(cluster)}.svg'


def order_longest_first(clusters: Iterable[str]) -> Tuple[str, ...]:
    """Order clusters by code point count, longest first, stable within a length."""
    return tuple(sorted(clusters, key=len, reverse=True))


def load_emoji_sequences(path: Path = EMOJI_DATA_FILE) -> Tuple[str, ...]:
    """
    Load and validate an emoji table file.

    The file holds one cluster per line. Blank lines and lines starting
    with "# " are ignored.

    Args:
        path: Table file (UTF-8)

    Returns:
        Tuple of clusters ordered longest-first

    Raises:
        SymbolTableError: unreadable file, a line with whitespace or plain
            ASCII in it, a duplicate cluster, or an empty table
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise SymbolTableError(f"Cannot read emoji table {path}: {e}") from e

    clusters = []
    seen = set()
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.startswith('# '):
            continue
        cluster = line.strip()
        if any(char.isspace() for char in cluster):
            raise SymbolTableError(f"{path}:{line_no}: whitespace inside emoji cluster")
        if cluster.isascii():
            raise SymbolTableError(f"{path}:{line_no}: {cluster!r} is not an emoji")
        if cluster in seen:
            raise SymbolTableError(f"{path}:{line_no}: duplicate emoji {cluster!r}")
        seen.add(cluster)
        clusters.append(cluster)

    if not clusters:
        raise SymbolTableError(f"Emoji table {path} is empty")

    logger.debug(f"Loaded {len(clusters)} emoji sequences from {path}")
    return order_longest_first(clusters)


EMOJI_SEQUENCES = load_emoji_sequences()


# =============================================================================
# Math characters
# =============================================================================

# Character -> TeX macro. Delimiters are added by the rewriter.
_MATH_MACROS = {
    'α': r'\alpha',
    'β': r'\beta',
    'γ': r'\gamma',
    'δ': r'\delta',
    'ε': r'\epsilon',
    'ζ': r'\zeta',
    'η': r'\eta',
    'θ': r'\theta',
    'ι': r'\iota',
    'κ': r'\kappa',
    'λ': r'\lambda',
    'μ': r'\mu',
    'ν': r'\nu',
    'ξ': r'\xi',
    'ο': r'o',
    'π': r'\pi',
    'ρ': r'\rho',
    'σ': r'\sigma',
    'τ': r'\tau',
    'υ': r'\upsilon',
    'φ': r'\phi',
    'χ': r'\chi',
    'ψ': r'\psi',
    'ω': r'\omega',
    'Α': r'\Alpha',
    'Β': r'\Beta',
    'Γ': r'\Gamma',
    'Δ': r'\Delta',
    'Ε': r'\Epsilon',
    'Ζ': r'\Zeta',
    'Η': r'\Eta',
    'Θ': r'\Theta',
    'Ι': r'\Iota',
    'Κ': r'\Kappa',
    'Λ': r'\Lambda',
    'Μ': r'\Mu',
    'Ν': r'\Nu',
    'Ξ': r'\Xi',
    'Ο': r'\Omicron',
    'Π': r'\Pi',
    'Ρ': r'\Rho',
    'Σ': r'\Sigma',
    'Τ': r'\Tau',
    'Υ': r'\Upsilon',
    'Φ': r'\Phi',
    'Χ': r'\Chi',
    'Ψ': r'\Psi',
    'Ω': r'\Omega',
    '∑': r'\sum',
    '∏': r'\prod',
    '∫': r'\int',
    '∂': r'\partial',
    '∞': r'\infty',
    '∇': r'\nabla',
    '≈': r'\approx',
    '≠': r'\neq',
    '≡': r'\equiv',
    '≤': r'\leq',
    '≥': r'\geq',
    '⊂': r'\subset',
    '⊃': r'\supset',
    '⊆': r'\subseteq',
    '⊇': r'\supseteq',
    '∈': r'\in',
    '∉': r'\notin',
    '∪': r'\cup',
    '∩': r'\cap',
    '∧': r'\wedge',
    '∨': r'\vee',
    '¬': r'\neg',
    '∀': r'\forall',
    '∃': r'\exists',
    '∅': r'\emptyset',
    'ℕ': r'\mathbb{N}',
    'ℤ': r'\mathbb{Z}',
    'ℚ': r'\mathbb{Q}',
    'ℝ': r'\mathbb{R}',
    'ℂ': r'\mathbb{C}',
    'ℙ': r'\mathbb{P}',
    'ℵ': r'\aleph',
    'ℶ': r'\beth',
    'ℷ': r'\gimel',
    'ℸ': r'\daleth',
    '⊕': r'\oplus',
    '⊗': r'\otimes',
    '⊥': r'\bot',
    '∠': r'\angle',
    '∟': r'\measuredangle',
    '∡': r'\sphericalangle',
    '∥': r'\parallel',
    '∦': r'\nparallel',
    '∴': r'\therefore',
    '∵': r'\because',
    '∷': r'\propto',
    '∸': r'\dotminus',
    '∹': r'\eqdot',
    '∺': r'\doteq',
    '∻': r'\doteqdot',
    '∼': r'\sim',
    '∽': r'\backsim',
    '∾': r'\backsimeq',
    '≀': r'\wr',
    '≁': r'\nsim',
    '≂': r'\eqsim',
    '≃': r'\simeq',
    '≄': r'\nsimeq',
    '≅': r'\cong',
    '≆': r'\ncong',
    '≇': r'\ncong',
    '≉': r'\napprox',
    '≊': r'\approxeq',
    '≋': r'\approxident',
    '≌': r'\asymp',
    '≍': r'\Bumpeq',
    '≎': r'\bumpeq',
    '≏': r'\doteq',
    '≐': r'\doteqdot',
    '≑': r'\fallingdotseq',
    '≒': r'\risingdotseq',
    '≓': r'\eqcirc',
    '≔': r'\circeq',
    '≕': r'\triangleq',
    '≖': r'\eqslantgtr',
    '≗': r'\eqslantless',
    '≘': r'\lessgtr',
    '≙': r'\gtrless',
    '≚': r'\lesseqgtr',
    '≛': r'\gtreqless',
    '≜': r'\lesseqqgtr',
    '≝': r'\gtreqqless',
    '≞': r'\lessdot',
    '≟': r'\gtrdot',
    '≢': r'\nequiv',
    '≣': r'\Equiv',
    '≦': r'\leqq',
    '≧': r'\geqq',
    '≨': r'\lneqq',
    '≩': r'\gneqq',
    '≪': r'\ll',
    '≫': r'\gg',
    '≬': r'\between',
    '≭': r'\notasymp',
    '≮': r'\nless',
    '≯': r'\ngtr',
    '≰': r'\nleq',
    '≱': r'\ngeq',
    '≲': r'\lesssim',
    '≳': r'\gtrsim',
    '≴': r'\nlesssim',
    '≵': r'\ngtrsim',
    '≶': r'\lessgtr',
    '≷': r'\gtrless',
    '≸': r'\nlessgtr',
    '≹': r'\ngtrless',
    '≺': r'\prec',
    '≻': r'\succ',
    '≼': r'\preccurlyeq',
    '≽': r'\succcurlyeq',
    '≾': r'\precsim',
    '≿': r'\succsim',
    '⊀': r'\nprec',
    '⊁': r'\nsucc',
    '⊄': r'\nsubset',
    '⊅': r'\nsupset',
    '⊈': r'\nsubseteq',
    '⊉': r'\nsupseteq',
    '⊊': r'\subsetneq',
    '⊋': r'\supsetneq',
    '⊌': r'\cupdot',
    '⊍': r'\uplus',
    '⊎': r'\sqcup',
    '⊏': r'\sqsubset',
    '⊐': r'\sqsupset',
    '⊑': r'\sqsubseteq',
    '⊒': r'\sqsupseteq',
    '⊓': r'\sqcap',
    '⊔': r'\sqcup',
    '⊖': r'\ominus',
    '⊘': r'\oslash',
    '⊙': r'\odot',
    '⊚': r'\circledcirc',
    '⊛': r'\circledast',
    '⊜': r'\circleddash',
    '⊝': r'\circledminus',
    '⊞': r'\boxplus',
    '⊟': r'\boxminus',
    '⊠': r'\boxtimes',
    '⊡': r'\boxdot',
    '⊢': r'\vdash',
    '⊣': r'\dashv',
    '⊤': r'\top',
    '⊦': r'\models',
    '⊧': r'\vDash',
    '⊨': r'\Vdash',
    '⊩': r'\Vvdash',
    '⊪': r'\VDash',
    '⊫': r'\nvdash',
    '⊬': r'\nvDash',
    '⊭': r'\nVdash',
    '⊮': r'\nVDash',
    '⊯': r'\nVvdash',
    '⊰': r'\vartriangleleft',
    '⊱': r'\vartriangleright',
    '⊲': r'\triangleleft',
    '⊳': r'\triangleright',
    '⊴': r'\trianglelefteq',
    '⊵': r'\trianglerighteq',
    '⊶': r'\multimap',
    '⊷': r'\multimapinv',
    '⊸': r'\multimapdot',
    '⊹': r'\multimapdotinv',
    '⊺': r'\multimapdotdot',
    '⊻': r'\multimapdotdotinv',
    '⊼': r'\multimapdotdotdot',
    '⊽': r'\multimapdotdotdotinv',
    '⊾': r'\multimapdotdotdotdot',
    '⊿': r'\multimapdotdotdotdotinv',
    '⋀': r'\bigwedge',
    '⋁': r'\bigvee',
    '⋂': r'\bigcap',
    '⋃': r'\bigcup',
    '⋄': r'\diamond',
    '⋅': r'\cdot',
    '⋆': r'\star',
    '⋇': r'\divideontimes',
    '⋈': r'\bowtie',
    '⋉': r'\ltimes',
    '⋊': r'\rtimes',
    '⋋': r'\leftthreetimes',
    '⋌': r'\rightthreetimes',
    '⋍': r'\backsimeq',
    '⋎': r'\curlyvee',
    '⋏': r'\curlywedge',
    '⋐': r'\Subset',
    '⋑': r'\Supset',
    '⋒': r'\Cap',
    '⋓': r'\Cup',
    '⋔': r'\pitchfork',
    '⋕': r'\equalparallel',
    '⋖': r'\lessdot',
    '⋗': r'\gtrdot',
    '⋘': r'\lll',
    '⋙': r'\ggg',
    '⋚': r'\lesseqgtr',
    '⋛': r'\gtreqless',
    '⋜': r'\lesseqqgtr',
    '⋝': r'\gtreqqless',
    '⋞': r'\lessdot',
    '⋟': r'\gtrdot',
    '⋠': r'\nlessdot',
    '⋡': r'\ngtrdot',
    '⋢': r'\nlesseqgtr',
    '⋣': r'\ngtreqless',
    '⋤': r'\nlesseqqgtr',
    '⋥': r'\ngtreqqless',
    '⋦': r'\lessdot',
    '⋧': r'\gtrdot',
    '⋨': r'\nlessdot',
    '⋩': r'\ngtrdot',
    '⋪': r'\nlesseqgtr',
    '⋫': r'\ngtreqless',
    '⋬': r'\nlesseqqgtr',
    '⋭': r'\ngtreqqless',
    '⋮': r'\vdots',
    '⋯': r'\cdots',
    '⋰': r'\ddots',
    '⋱': r'\iddots',
    '⋲': r'\adots',
    '⋳': r'\ddots',
    '⋴': r'\iddots',
    '⋵': r'\adots',
    '⋶': r'\ddots',
    '⋷': r'\iddots',
    '⋸': r'\adots',
    '⋹': r'\ddots',
    '⋺': r'\iddots',
    '⋻': r'\adots',
    '⋼': r'\ddots',
    '⋽': r'\iddots',
    '⋾': r'\adots',
    '⋿': r'\ddots',
}

MATH_MACROS = MappingProxyType(_MATH_MACROS)


def _validate_math_macros(table) -> None:
    for char, macro in table.items():
        if len(char) != 1:
            raise SymbolTableError(f"Math table key {char!r} is not a single character")
        if not macro.startswith('\\') and not macro.isalpha():
            raise SymbolTableError(f"Math table value {macro!r} is not a TeX macro")
        # Replacements must never contain keys, so one pass is enough.
        clash = next((c for c in macro if c in table), None)
        if clash is not None:
            raise SymbolTableError(f"TeX macro {macro!r} contains table character {clash!r}")


_validate_math_macros(MATH_MACROS)
