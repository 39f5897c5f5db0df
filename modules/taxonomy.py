"""
Taxonomy Module - 콘텐츠 키워드 분류 모듈
Bio / 캡션 / 해시태그 / 토픽 텍스트에서 카테고리, 스타일, 위험 키워드를 추출합니다.
"""

from collections import Counter
from typing import Dict, List

from .normalizer import RawPlatformRecord


# 콘텐츠 카테고리 키워드 (영문 + 한글 + 중문)
CATEGORY_KEYWORDS = {
    'beauty': ['beauty', 'makeup', 'skincare', 'cosmetic', 'hair', '뷰티', '메이크업', '스킨케어', '화장품', '美妝', '保養'],
    'fashion': ['fashion', 'ootd', 'outfit', 'lookbook', '패션', '코디', '데일리룩', '時尚', '穿搭'],
    'tech': ['tech', 'gadget', 'review', 'unboxing', 'smartphone', '테크', '언박싱', '리뷰', '科技', '開箱'],
    'gaming': ['gaming', 'game', 'esports', 'minecraft', 'fortnite', '게임', '게이밍', '遊戲'],
    'food': ['food', 'recipe', 'cooking', 'mukbang', 'restaurant', '먹방', '요리', '레시피', '맛집', '美食'],
    'travel': ['travel', 'trip', 'vlog', 'hotel', 'tour', '여행', '브이로그', '旅遊', '旅行'],
    'fitness': ['fitness', 'workout', 'gym', 'yoga', 'health', '운동', '헬스', '다이어트', '健身'],
    'lifestyle': ['lifestyle', 'daily', 'life', 'home', 'routine', '일상', '라이프스타일', '루틴', '生活'],
    'entertainment': ['entertainment', 'comedy', 'challenge', 'prank', 'music', 'dance', '예능', '챌린지', '음악', '娛樂'],
    'education': ['education', 'tutorial', 'howto', 'learn', 'tips', 'science', '교육', '강의', '꿀팁', '教學'],
    'parenting': ['parenting', 'kids', 'baby', 'family', 'mommy', '육아', '아기', '가족', '親子'],
    'finance': ['finance', 'investing', 'stock', 'crypto', 'money', '재테크', '투자', '주식', '理財'],
    'luxury': ['luxury', 'premium', 'designer', 'highend', '럭셔리', '명품', '프리미엄', '精品'],
}

# 카테고리 키워드 가중치 (대표 키워드는 더 높은 점수)
CATEGORY_WEIGHTS = {
    'beauty': 2.0, 'makeup': 2.0, 'skincare': 2.0, 'fashion': 2.0, 'gaming': 2.0,
    'recipe': 1.5, 'tutorial': 1.5, 'unboxing': 1.5, 'workout': 1.5, 'parenting': 2.0,
    '뷰티': 2.0, '패션': 2.0, '먹방': 2.0, '육아': 2.0, '게임': 2.0
}

# 콘텐츠 스타일 키워드
STYLE_KEYWORDS = {
    'humorous': ['funny', 'comedy', 'lol', 'prank', 'meme', '웃긴', '유머', '개그', '搞笑'],
    'educational': ['tutorial', 'howto', 'guide', 'learn', 'explained', 'tips', '강의', '꿀팁', '정보', '教學'],
    'professional': ['professional', 'expert', 'certified', 'official', '전문가', '자격증', '원장', '專業'],
    'casual': ['casual', 'daily', 'vlog', 'chill', '일상', '브이로그', '日常'],
    'luxury': ['luxury', 'premium', 'highend', '럭셔리', '명품', '精品'],
    'playful': ['fun', 'challenge', 'game', 'cute', '챌린지', '귀여운', '有趣'],
    'creative': ['creative', 'artwork', 'diy', 'design', 'handmade', '창작', '디자인', '創意'],
    'elegant': ['elegant', 'classy', 'chic', 'minimal', '우아', '시크', '미니멀', '優雅'],
    'authentic': ['honest', 'real', 'unsponsored', 'rawreview', '솔직', '솔직후기', '真實'],
    'inspirational': ['motivation', 'inspire', 'mindset', 'goals', '동기부여', '자기계발', '勵志'],
    'friendly': ['friends', 'community', 'together', 'hello', '친구', '소통', '朋友'],
    'sophisticated': ['curated', 'refined', 'editorial', 'gallery', '감성', '품격'],
    'innovative': ['innovation', 'future', 'startup', 'tech', '혁신', '創新'],
    'modern': ['trend', 'trendy', 'modern', 'y2k', 'street', '트렌디', '힙', '潮流'],
    'traditional': ['traditional', 'heritage', 'classic', 'handcraft', '전통', '클래식', '傳統'],
}

# 브랜드 안전 위험 키워드
RISK_KEYWORDS = {
    'violence': ['violence', 'fight', 'guns', 'weapon', 'blood', '폭력', '싸움', '暴力'],
    'adult': ['nsfw', 'adult', '18+', 'onlyfans', 'explicit', '성인', '야한', '色情'],
    'gambling': ['gambling', 'casino', 'betting', 'slots', 'poker', '도박', '카지노', '토토', '賭博'],
    'substance': ['drugs', 'weed', 'vape', 'drunk', '마약', '음주', '毒品'],
    'profanity': ['fuck', 'shit', 'wtf', '씨발', '존나'],
    'controversy': ['scandal', 'controversy', 'cancelled', 'exposed', 'drama', '논란', '폭로', '사과문', '爭議'],
    'politics': ['politics', 'election', 'protest', '정치', '선거', '시위', '政治'],
}

# 광고 표기 키워드
SPONSORED_KEYWORDS = ['sponsored', 'partner', 'collab', 'gifted', '협찬', '광고', '유료광고', '合作', '業配']
DISCLOSURE_TAGS = ['ad', 'sponsored', 'paidpartnership', '광고', '유료광고', '廣告']


def _match_keywords(text: str, table: Dict[str, List[str]],
                    weights: Dict[str, float] = None) -> Dict[str, float]:
    """키워드 테이블 매칭 점수 (카테고리 -> 점수)"""
    scores = {}
    for name, keywords in table.items():
        score = 0.0
        for keyword in keywords:
            count = text.count(keyword.lower())
            if count > 0:
                score += count * (weights or {}).get(keyword, 1.0)
        if score > 0:
            scores[name] = score
    return scores


def _ranked(scores: Dict[str, float]) -> List[str]:
    return [name for name, _ in sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))]


def extract_text_features(record: RawPlatformRecord) -> Dict:
    """
    레코드의 텍스트(bio, 캡션, 해시태그, 토픽)에서 특징을 추출합니다.

    Args:
        record: 정규화 레코드

    Returns:
        텍스트 특징 딕셔너리
    """
    captions = [post.caption for post in record.recent_posts if post.caption]
    hashtags = [tag for post in record.recent_posts for tag in post.hashtags]

    full_text = ' '.join([record.bio] + list(record.content_topics) + captions + hashtags)
    full_text_lower = full_text.lower()

    category_scores = _match_keywords(full_text_lower, CATEGORY_KEYWORDS, CATEGORY_WEIGHTS)
    style_scores = _match_keywords(full_text_lower, STYLE_KEYWORDS)
    risk_scores = _match_keywords(full_text_lower, RISK_KEYWORDS)

    # 광고 표기 여부
    tag_set = {tag.lower() for tag in hashtags}
    sponsored = any(kw in full_text_lower for kw in SPONSORED_KEYWORDS)
    disclosed = any(tag in tag_set for tag in DISCLOSURE_TAGS)

    hashtag_counts = Counter(tag.lower() for tag in hashtags)

    return {
        'text_length': len(full_text),
        'caption_count': len(captions),
        'avg_caption_length': (sum(len(c) for c in captions) / len(captions)) if captions else 0.0,
        'hashtags': [tag for tag, _ in hashtag_counts.most_common()],
        'categories': _ranked(category_scores),
        'category_scores': category_scores,
        'styles': _ranked(style_scores),
        'risk_categories': _ranked(risk_scores),
        'sponsored_content': sponsored,
        'sponsorship_disclosed': disclosed,
    }
