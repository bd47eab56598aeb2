"""Source (main, sub) category -> canonical (main, sub) category mapping.

The Coloso table is maintained by hand. Matching is exact on both source
titles and the first matching row wins; keys are expected to be unique, see
find_duplicate_keys().
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence, Tuple

from .base import TaxonomyEntry
from .errors import NoMappingError


def _rows(rows: Iterable[Tuple[str, str, str, str]]) -> Tuple[TaxonomyEntry, ...]:
    return tuple(TaxonomyEntry(*r) for r in rows)


COLOSO_TAXONOMY: Tuple[TaxonomyEntry, ...] = _rows(
    [
        # Drawing / illustration
        ("드로잉", "일러스트", "Art & Design", "Illustration"),
        ("드로잉", "웹툰", "Art & Design", "Webtoon & Comics"),
        ("드로잉", "캐릭터 디자인", "Art & Design", "Character Design"),
        ("드로잉", "컨셉아트", "Art & Design", "Concept Art"),
        ("드로잉", "인물 드로잉", "Art & Design", "Drawing Fundamentals"),
        ("드로잉", "배경 드로잉", "Art & Design", "Drawing Fundamentals"),
        # Design
        ("디자인", "그래픽 디자인", "Art & Design", "Graphic Design"),
        ("디자인", "브랜딩", "Art & Design", "Branding"),
        ("디자인", "UX/UI", "Art & Design", "UX/UI Design"),
        ("디자인", "타이포그래피", "Art & Design", "Typography"),
        ("디자인", "제품 디자인", "Art & Design", "Product Design"),
        # 3D / VFX / video
        ("영상/3D/VFX", "3D 모델링", "3D & Animation", "3D Modeling"),
        ("영상/3D/VFX", "애니메이션", "3D & Animation", "Animation"),
        ("영상/3D/VFX", "VFX", "3D & Animation", "VFX"),
        ("영상/3D/VFX", "모션그래픽", "Video", "Motion Graphics"),
        ("영상/3D/VFX", "영상 편집", "Video", "Video Editing"),
        # Game
        ("게임", "게임 아트", "Game Development", "Game Art"),
        ("게임", "게임 기획", "Game Development", "Game Design"),
        ("게임", "게임 개발", "Game Development", "Game Programming"),
        # Photo
        ("사진", "사진 촬영", "Photography", "Photography"),
        ("사진", "보정", "Photography", "Photo Editing"),
        # Music / sound
        ("음악/사운드", "작곡", "Music", "Composition"),
        ("음악/사운드", "사운드 디자인", "Music", "Sound Design"),
        # Business / marketing
        ("마케팅", "퍼포먼스 마케팅", "Business", "Marketing"),
        ("마케팅", "콘텐츠 마케팅", "Business", "Marketing"),
    ]
)


def map_category(
    main_category: str,
    sub_category: str,
    table: Sequence[TaxonomyEntry] = COLOSO_TAXONOMY,
) -> TaxonomyEntry:
    """Return the first table row whose source titles equal the given pair.

    Raises NoMappingError when the pair is absent.
    """
    for entry in table:
        if entry.source_main_category == main_category and entry.source_sub_category == sub_category:
            return entry
    raise NoMappingError(main_category, sub_category)


def find_duplicate_keys(table: Sequence[TaxonomyEntry]) -> List[Tuple[str, str]]:
    counts = Counter((e.source_main_category, e.source_sub_category) for e in table)
    return [k for k, n in counts.items() if n > 1]
