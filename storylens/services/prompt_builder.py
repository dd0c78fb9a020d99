"""
Prompt construction for review generation.

Builds the Korean instruction sent to the multimodal model together with the
photographs. The template fixes tone, title rules, paragraph plan and the
five keyword placements the analysis pipeline later verifies.
"""
import logging

from storylens.core.constants import EXPECTED_PARAGRAPH_COUNT
from storylens.core.error_handling import InputValidationError

logger = logging.getLogger(__name__)


STORY_PROMPT_TEMPLATE = """당신은 호텔 고객후기 전문 라이터입니다. {image_count}장 사진을 분석하여 "{business}" 고객후기를 작성합니다.

[1️⃣ 기본 설정]
- 목표: {paragraph_count}개 문단, 정확히 완성
- 톤: 발랄 70% + 전문성 30%
- 어미: 회상형 구어체 (~했죠, ~더군요, ~같았어요)
- 감탄부호: 절대 금지
- 길이: 한 문장 25자 이내 (짧게 끊기)
- 문단: 3~4문장 구성

[2️⃣ 제목 규칙]
형식: 제목: [키워드] [감각적 표현]
예: 제목: {business}, 부족함 없이 보낸 아름다운 {keyword}
예: 제목: {business}, 일과 휴식이 어우러진 {keyword}

규칙:
- "제목:"으로 시작
- 키워드 정확히 1회
- 업체명 정확히 1회
- 마침표/특수문자 금지

[3️⃣ 키워드 배치 - 정확히 5회]
- 1번: 1회
- 5~6번 중: 1회
- 8~9번 중: 1회
- 11~12번 중: 1회
- {paragraph_count}번: 1회

금지:
- 한 문장에 2회 이상
- 한 문단에 2회 이상
- 두 키워드 직결

[4️⃣ 키워드 삽입 방식]
✅ 안전:
- 경험 회고: "이 부분이 {keyword}에서 기억에 남았어요."
- 상황 설명: "{keyword} 범주에 포함될 조건을 갖추고 있었죠."
- 관찰형: "{keyword}으로 자주 언급되는 이유는…"

❌ 위험:
- "검색하신 분들이라면 꼭 보셔야 할 {keyword}"
- "{keyword}을 추천드립니다"
- "완벽한 {keyword}는 최고입니다"

[5️⃣ 톤과 스타일]
- 감정 문장 2줄 연속 금지 → 기능 설명 삽입
- 동일 종결어미 3회 이상 반복 금지
- 추상어 금지 (구체 묘사만)
- 접속사 남발 금지
- 의문형 10% 포함

[6️⃣ 절대 금지]
- 마크다운 형식
- 감탄부호 (!, 와, 오)
- 1인칭 (저는, 나는)
- 반말, 비문
- 키워드 변형, 따옴표로 키워드 감싸기
- 메타 문장, 독자 설득, 행동 유도
- 절대 표현(완벽, 최고, 평생, 레전드, 압도적)은 1~2회만

[7️⃣ 문단 구성]
1번: 서론 (여정 시작, 감정, 키워드 1회)
2~{last_body}번: 각 사진 1장에 대응하는 본문 (사진 순서대로)
{paragraph_count}번: 결론 (회고형, 키워드 1회)

[8️⃣ 출력 형식]
제목: [제목 내용]

1. 첫 번째 문단
2. 두 번째 문단
...
{paragraph_count}. 마지막 문단

[핵심]
- {paragraph_count}개 문단 모두 완성할 때까지 계속 작성
- 절대 중간에 멈추지 말 것
- 각 문단은 완전한 문장으로 마무리"""


def build_story_prompt(
    keyword: str,
    business_name: str,
    image_count: int,
    paragraph_count: int = EXPECTED_PARAGRAPH_COUNT
) -> str:
    """
    Build the generation instruction for one keyword.

    Args:
        keyword: User keyword to place in the review (trimmed)
        business_name: Business featured in the title and body
        image_count: Number of photographs sent with the prompt
        paragraph_count: Number of paragraphs to request

    Returns:
        Prompt text

    Raises:
        InputValidationError: If the keyword is empty
    """
    keyword = (keyword or "").strip()
    if not keyword:
        raise InputValidationError("키워드가 필요합니다.")

    prompt = STORY_PROMPT_TEMPLATE.format(
        keyword=keyword,
        business=business_name,
        image_count=image_count,
        paragraph_count=paragraph_count,
        last_body=paragraph_count - 1
    )
    logger.debug(f"Built story prompt ({len(prompt)} chars) for keyword '{keyword}'")
    return prompt
