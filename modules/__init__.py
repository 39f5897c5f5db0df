"""
KOL Report Standardization Engine - Modules
"""

from .errors import (
    KOLEngineError,
    UnsupportedPlatformError,
    MalformedInputError
)

from .platforms import (
    Platform,
    detect_platform,
    extract_username,
    profile_url
)

from .normalizer import (
    PostSnapshot,
    RawPlatformRecord,
    normalize_record,
    parse_count
)

from .metrics import (
    extract_metrics,
    format_followers,
    calculate_engagement_rate,
    calculate_post_frequency
)

from .taxonomy import extract_text_features
from .integrity import calculate_integrity_score

from .audience_analyzer import analyze_audience
from .content_analyzer import analyze_content
from .business_analyzer import analyze_business
from .risk_analyzer import analyze_risk
from .analyzers import AnalyzerSet, DEFAULT_ANALYZERS

from .evaluator import (
    evaluate_dimensions,
    calculate_weighted_score,
    assign_grade,
    assign_recommendation,
    DIMENSION_SCORERS
)

from .brand_profile import BrandProfile

from .matcher import (
    MatchCandidate,
    calculate_brand_match
)

from .report_assembler import (
    DataSource,
    StandardizedKOLReport,
    InfluencerMatchScore,
    assemble_report,
    standardize_report,
    assemble_match_score,
    rank_matches
)

__all__ = [
    # Errors
    'KOLEngineError',
    'UnsupportedPlatformError',
    'MalformedInputError',

    # Platforms
    'Platform',
    'detect_platform',
    'extract_username',
    'profile_url',

    # Normalizer
    'PostSnapshot',
    'RawPlatformRecord',
    'normalize_record',
    'parse_count',

    # Metrics
    'extract_metrics',
    'format_followers',
    'calculate_engagement_rate',
    'calculate_post_frequency',

    # Text / Integrity
    'extract_text_features',
    'calculate_integrity_score',

    # Analyzers
    'analyze_audience',
    'analyze_content',
    'analyze_business',
    'analyze_risk',
    'AnalyzerSet',
    'DEFAULT_ANALYZERS',

    # Evaluator
    'evaluate_dimensions',
    'calculate_weighted_score',
    'assign_grade',
    'assign_recommendation',
    'DIMENSION_SCORERS',

    # Matching
    'BrandProfile',
    'MatchCandidate',
    'calculate_brand_match',

    # Report
    'DataSource',
    'StandardizedKOLReport',
    'InfluencerMatchScore',
    'assemble_report',
    'standardize_report',
    'assemble_match_score',
    'rank_matches'
]
