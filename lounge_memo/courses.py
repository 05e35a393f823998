"""
Course Catalog

Static table of every known course with its series and shorthand aliases,
plus the lookups used to resolve OCR text on the course-select screen.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from .ocr.result import Word
from .text import normalize

logger = logging.getLogger(__name__)


class Series(Enum):
    """Release generation a course comes from."""
    SFC = "SFC"
    GBA = "GBA"
    N64 = "N64"
    GC = "GC"
    DS = "DS"
    WII = "Wii"
    THREE_DS = "3DS"
    NEW = "New"
    TOUR = "Tour"


# Checked in order; "3ds" must come before "ds"
SERIES_TOKENS: Tuple[Tuple[str, Series], ...] = (
    ("sfc", Series.SFC),
    ("gba", Series.GBA),
    ("n64", Series.N64),
    ("gc", Series.GC),
    ("3ds", Series.THREE_DS),
    ("ds", Series.DS),
    ("wii", Series.WII),
    ("tour", Series.TOUR),
)

# Course names render near the bottom of the course-select screen
CANDIDATE_Y_RATIO = 950 / 1080
CANDIDATE_MIN_CHARS = 6


@dataclass(frozen=True)
class Course:
    """A course; equality is by value."""
    name: str
    series: Series

    def __str__(self) -> str:
        if self.series is Series.NEW:
            return self.name
        return f"{self.series.value} {self.name}"


# (name, series, shorthand aliases) in cup order
COURSE_DATA: Tuple[Tuple[str, Series, Tuple[str, ...]], ...] = (
    ("マリオカートスタジアム", Series.NEW, ("mks", "ﾏﾘｵｶｰﾄｽﾀｼﾞｱﾑ", "ﾏﾘｶｽ")),
    ("ウォーターパーク", Series.NEW, ("wp", "ｳｫｰﾀﾊﾟｰｸ", "ｦｰﾀｰﾊﾟｰｸ", "ｳｫﾀﾊﾟ", "ｦﾀﾊﾟ", "ｵﾀﾊﾟ")),
    ("スイーツキャニオン", Series.NEW, ("ssc", "ｽｲｰﾂｷｬﾆｵﾝ", "ｽｲｷｬﾆ")),
    ("ドッスンいせき", Series.NEW, ("tr", "ﾄﾞｯｽﾝｲｾｷ", "ﾄﾞｯｽﾝ", "ｲｾｷ", "ﾄﾞｯｽﾝ遺跡", "遺跡")),
    ("マリオサーキット", Series.NEW, ("mc", "ﾏﾘｵｻｰｷｯﾄ", "ﾏﾘｻ", "新ﾏﾘｻ", "ｼﾝﾏﾘｻ")),
    ("キノピオハーバー", Series.NEW, ("th", "ｷﾉﾋﾟｵﾊｰﾊﾞｰ", "ﾊｰﾊﾞｰ")),
    ("ねじれマンション", Series.NEW, ("tm", "ﾈｼﾞﾚﾏﾝｼｮﾝ", "ﾈｼﾞﾏﾝ", "ﾈｼﾞﾚ", "ﾈｼﾞｼｮﾝ", "ﾈｼﾞ", "ﾈｼﾞﾈｼﾞ", "ﾏﾝｼｮﾝ")),
    ("ヘイホーこうざん", Series.NEW, ("sgf", "ﾍｲﾎｰｺｳｻﾞﾝ", "ﾍｲﾎｰ鉱山", "ﾍｲｺｰ", "ﾍｲｺｳ", "ﾍｲ鉱")),
    ("サンシャインくうこう", Series.NEW, ("sa", "ｻﾝｼｬｲﾝｸｳｺｳ", "空港", "ｸｳｺｳ", "ｻﾝｼｬｲﾝ")),
    ("ドルフィンみさき", Series.NEW, ("ds", "ﾄﾞﾙﾌｨﾝﾐｻｷ", "ﾄﾞﾙﾐ", "ﾐｻｷ", "ﾄﾞﾙﾌｨﾝ岬", "岬")),
    ("エレクトロドリーム", Series.NEW, ("ed", "ｴﾚｸﾄﾛﾄﾞﾘｰﾑ", "ｴﾚﾄﾞ", "ｴﾚﾄﾞﾘ")),
    ("ワリオスノーマウンテン", Series.NEW, ("mw", "ﾜﾘｵｽﾉｰﾏｳﾝﾃﾝ", "ﾜﾘｽﾉ", "ﾕｷﾔﾏ", "雪山", "ｽﾉ", "ﾕｷﾔﾏｳﾝﾃﾝ")),
    ("スカイガーデン", Series.NEW, ("cc", "ｽｶｲｶﾞｰﾃﾞﾝ", "ｽｶｶﾞ")),
    ("ホネホネさばく", Series.NEW, ("bdd", "ﾎﾈﾎﾈｻﾊﾞｸ", "ﾎﾈｻﾊﾞ", "ﾎﾈﾎﾈ")),
    ("クッパキャッスル", Series.NEW, ("bc", "ｸｯﾊﾟｷｬｯｽﾙ", "ｸﾊﾟｷｬ", "ｸｷｬﾊﾟ", "ｸｯｷｬﾊﾟｯｽﾙ")),
    ("レインボーロード", Series.NEW, ("rr", "ﾚｲﾝﾎﾞｰﾛｰﾄﾞ", "新虹", "ｼﾝﾆｼﾞ")),
    ("ヨッシーサーキット", Series.GC, ("dyc", "yc", "ﾖｯｼｰｻｰｷｯﾄ", "ﾖｼｻ")),
    ("エキサイトバイク", Series.NEW, ("dea", "ea", "ｴｷｻｲﾄﾊﾞｲｸ", "ｴｷﾊﾞ")),
    ("ドラゴンロード", Series.NEW, ("ddd", "dd", "ﾄﾞﾗｺﾞﾝﾛｰﾄﾞ", "ﾄﾞﾗﾛ")),
    ("ミュートシティ", Series.NEW, ("dmc", "ﾐｭｰﾄｼﾃｨ", "ﾐｭｰﾄ")),
    ("ベビィパーク", Series.GC, ("dbp", "bp", "ﾍﾞﾋﾞｨﾊﾟｰｸ", "ﾍﾞﾋﾞｰﾊﾟｰｸ", "ﾍﾞﾋﾞﾊﾟ")),
    ("チーズランド", Series.GBA, ("dcl", "cl", "ﾁｰｽﾞﾗﾝﾄﾞ", "ﾁｰｽﾞ")),
    ("ネイチャーロード", Series.NEW, ("dww", "ww", "ﾈｲﾁｬｰﾗﾝﾄﾞ", "ﾈｲﾁｬｰ", "ﾅﾁｭﾚ")),
    ("どうぶつの森", Series.NEW, ("dac", "ac", "ﾄﾞｳﾌﾞﾂﾉﾓﾘ", "ﾄﾞｳﾓﾘ", "ﾌﾞﾂﾓﾘ", "ﾄﾞｳ森", "ﾌﾞﾂ森", "ﾄﾞｳﾌﾞﾂﾉ森")),
    ("モーモーカントリー", Series.WII, ("rmmm", "mmm", "ﾓｰﾓｰｶﾝﾄﾘｰ", "ﾓﾓｶﾝ", "ﾓｰﾓｰ")),
    ("マリオサーキット", Series.GBA, ("rmc", "gba", "ｸﾞﾊﾞ", "gbaﾏﾘｵｻｰｷｯﾄ", "gbaﾏﾘｻ")),
    ("プクプクビーチ", Series.DS, ("rccb", "ccb", "ﾌﾟｸﾌﾟｸﾋﾞｰﾁ", "ﾌﾟｸﾌﾟｸ", "ﾌﾟｸﾋﾞ")),
    ("キノピオハイウェイ", Series.N64, ("rtt", "tt", "ｷﾉﾋﾟｵﾊｲｳｪｲ", "ﾊｲｳｪｲ")),
    ("カラカラさばく", Series.GC, ("rddd", "ｶﾗｶﾗｻﾊﾞｸ", "ｶﾗｻﾊﾞ", "ｻﾊﾞｸ", "gcｶﾗ", "gcｶﾗｻﾊﾞ", "gcｻﾊﾞ")),
    ("ドーナツへいや3", Series.SFC, ("rdp3", "rdp", "dp3", "ﾄﾞｰﾅﾂﾍｲﾔ", "ﾍｲﾔ", "ﾄﾞｰﾅﾂ平野", "平野")),
    ("ピーチサーキット", Series.N64, ("rrry", "rry", "ﾋﾟｰﾁｻｰｷｯﾄ", "ﾋﾟﾁｻ")),
    ("DKジャングル", Series.THREE_DS, ("rdkj", "dk", "dkj", "dkｼﾞｬﾝｸﾞﾙ", "ｼﾞｬﾝｸﾞﾙ")),
    ("ワリオスタジアム", Series.DS, ("rws", "ws", "ﾜﾘｵｽﾀｼﾞｱﾑ", "ﾜﾘｽﾀ")),
    ("シャーベットランド", Series.GC, ("rsl", "sl", "ｼｬｰﾍﾞｯﾄﾗﾝﾄﾞ", "ｼｬｰﾍﾞｯﾄ", "ｼｬﾍﾞﾗﾝ", "ｼｬﾍﾞ")),
    ("ミュージックパーク", Series.THREE_DS, ("rmp", "mp", "ﾐｭｰｼﾞｯｸﾊﾟｰｸ", "ﾐｭｰﾊﾟ")),
    ("ヨッシーバレー", Series.N64, ("ryv", "yv", "ﾖｯｼｰﾊﾞﾚｰ", "ﾖｼﾊﾞ")),
    ("チクタクロック", Series.DS, ("rttc", "ttc", "ﾁｸﾀｸﾛｯｸ", "ﾁｸﾀｸ")),
    ("パックンスライダー", Series.THREE_DS, ("rpps", "pps", "ﾊﾟｯｸﾝｽﾗｲﾀﾞｰ", "ﾊﾟｸｽﾗ", "ﾊﾟｯｸﾝ")),
    ("グラグラかざん", Series.WII, ("rgv", "gv", "ｸﾞﾗｸﾞﾗｶｻﾞﾝ", "ｸﾞﾗｸﾞﾗ", "ｶｻﾞﾝ")),
    ("レインボーロード", Series.N64, ("rrrd", "rrd", "64ﾚｲﾝﾎﾞｰﾛｰﾄﾞ", "64ﾆｼﾞ", "64虹", "ﾛｸﾖﾝ")),
    ("ワリオこうざん", Series.WII, ("dwgm", "wgm", "ﾜﾘｵｺｳｻﾞﾝ", "ﾜﾘｺｳ", "ﾜﾘｵ鉱山", "ﾜﾘ鉱")),
    ("レインボーロード", Series.SFC, ("drr", "sfcﾆｼﾞ", "sfcﾚｲﾝﾎﾞｰﾛｰﾄﾞ", "sfc虹", "sfc")),
    ("ツルツルツイスター", Series.NEW, ("diio", "iio", "ﾂﾙﾂﾙﾂｲｽﾀｰ", "ﾂﾂﾂ", "ﾂﾙﾂﾙ")),
    ("ハイラルサーキット", Series.NEW, ("dhc", "hc", "ﾊｲﾗﾙｻｰｷｯﾄ", "ﾊｲﾗﾙ")),
    ("ネオクッパシティ", Series.THREE_DS, ("dnbc", "nbc", "ﾈｵｸｯﾊﾟｼﾃｨ", "ﾈｵﾊﾟ", "ﾈｵｸｯﾊﾟ")),
    ("リボンロード", Series.GBA, ("drir", "rir", "ﾘﾎﾞﾝﾛｰﾄﾞ", "ﾘﾎﾞﾝ")),
    ("リンリンメトロ", Series.NEW, ("dsbs", "sbs", "ﾘﾝﾘﾝﾒﾄﾛ", "ﾘﾝﾒﾄ")),
    ("ビッグブルー", Series.NEW, ("dbb", "bb", "ﾋﾞｯｸﾞﾌﾞﾙｰ")),
    ("パリプロムナード", Series.TOUR, ("bpp", "pp", "paris", "ﾊﾟﾘﾌﾟﾛﾑﾅｰﾄﾞ", "ﾊﾟﾘ")),
    ("キノピオサーキット", Series.THREE_DS, ("btc", "tc", "ｷﾉﾋﾟｵｻｰｷｯﾄ", "ｷﾉｻ")),
    ("チョコマウンテン", Series.N64, ("bcmo", "bcm64", "bchm", "cmo", "chm", "cm64", "ﾁｮｺﾏｳﾝﾃﾝ", "ﾁｮｺ", "ﾁｮｺﾏ")),
    ("ココナッツモール", Series.WII, ("bcma", "bcom", "bcmw", "cma", "com", "cmw", "ｺｺﾅｯﾂﾓｰﾙ", "ｺｺﾓ", "ｺｺﾅｯﾂ", "ﾅｯﾂ")),
    ("トーキョースクランブル", Series.TOUR, ("btb", "tb", "tokyo", "ﾄｰｷｮｰｽｸﾗﾝﾌﾞﾙ", "ｽｸﾗﾝﾌﾞﾙ", "ﾄｰｷｮｰ", "ﾄｳｷｮｳ", "ﾄｰｷｮｳ", "ﾄｳｷｮｰ", "東京")),
    ("キノコリッジウェイ", Series.DS, ("bsr", "sr", "ｷﾉｺﾘｯｼﾞｳｪｲ", "ｷﾉｺﾘｯｼﾞ", "ﾘｯｼﾞｳｪｲ", "ｷﾉｺﾘ", "ｷｺﾘ", "ﾘｯｼﾞ")),
    ("スカイガーデン", Series.GBA, ("bsg", "sg", "gbaｽｶｲｶﾞｰﾃﾞﾝ", "gbaｽｶ", "ｸﾞﾊﾞｽｶ", "ｸﾞﾊﾞｽｶｶﾞ", "gbaｽｶｶﾞ")),
    ("ニンニンドージョー", Series.NEW, ("bnh", "nh", "ﾆﾝﾆﾝﾄﾞｰｼﾞｮｰ", "ﾆﾝｼﾞｮｰ", "ﾆﾝﾆﾝ")),
    ("ニューヨークドリーム", Series.TOUR, ("bnym", "nym", "ﾆｭｰﾖｰｸﾄﾞﾘｰﾑ", "ﾆｭｰﾖｰｸ", "ﾆｭｰﾄﾞﾘ", "ny")),
    ("マリオサーキット3", Series.SFC, ("bmc3", "mc3", "ﾏﾘｵｻｰｷｯﾄ3", "ﾏﾘｻ3", "sfcﾏﾘｻ", "sfcﾏﾘｵｻｰｷｯﾄ", "sfcﾏﾘｻ3", "sfcﾏﾘｵｻｰｷｯﾄ3")),
    ("カラカラさばく", Series.N64, ("bkd", "kd", "64ｶﾗｻﾊﾞ", "64ｶﾗ", "64ｻﾊﾞ")),
    ("ワルイージピンボール", Series.DS, ("bwp", "ﾜﾙｲｰｼﾞﾋﾟﾝﾎﾞｰﾙ", "ﾜﾙﾋﾟﾝ", "ﾋﾟﾝﾎﾞｰﾙ")),
    ("シドニーサンシャイン", Series.TOUR, ("bss", "ss", "bsys", "sys", "ｼﾄﾞﾆｰｻﾝｼｬｲﾝ", "ｼﾄﾞﾆｰ")),
    ("スノーランド", Series.GBA, ("bsl", "ｽﾉｰﾗﾝﾄﾞ", "ｽﾉﾗﾝ")),
    ("キノコキャニオン", Series.WII, ("bmg", "mg", "ｷﾉｺｷｬﾆｵﾝ", "ｷﾉｷｬﾆ", "ｷｬﾆｵﾝ")),
    ("アイスビルディング", Series.NEW, ("bshs", "shs", "ｱｲｽﾋﾞﾙﾃﾞｨﾝｸﾞ", "ｱｲｽ")),
    ("ロンドンアベニュー", Series.TOUR, ("bll", "ll", "ﾛﾝﾄﾞﾝｱﾍﾞﾆｭｰ", "ﾛﾝﾄﾞﾝ")),
    ("テレサレイク", Series.GBA, ("bbl", "bl", "ﾃﾚｻﾚｲｸ", "ﾚｲｸ", "ﾃﾚｲｸ")),
    ("ロックロックマウンテン", Series.THREE_DS, ("brrm", "rrm", "ﾛｯｸﾛｯｸﾏｳﾝﾃﾝ", "ﾛｸﾏ", "ﾛｯｸ", "岩山", "ﾛｯｸﾛｯｸ")),
    ("メイプルツリーハウス", Series.WII, ("bmt", "mt", "ﾒｲﾌﾟﾙﾂﾘｰﾊｳｽ", "ﾒｲﾌﾟﾙ")),
    ("ベルリンシュトラーセ", Series.TOUR, ("bbb", "ﾍﾞﾙﾘﾝｼｭﾄﾗｰｾ", "ﾍﾞﾙﾘﾝ")),
    ("ピーチガーデン", Series.DS, ("bpg", "pg", "ﾋﾟｰﾁｶﾞｰﾃﾞﾝ", "ﾋﾟﾁｶﾞ", "ｶﾞｰﾃﾞﾝ")),
    ("メリーメリーマウンテン", Series.NEW, ("bmm", "mm", "ﾒﾘｰﾒﾘｰﾏｳﾝﾃﾝ", "ﾒﾘﾏ", "ﾒﾘｰﾒﾘｰ", "ﾒﾘｰ", "ﾒﾘﾔﾏ", "ﾒﾘ山")),
    ("レインボーロード", Series.THREE_DS, ("brr7", "rr7", "3dsﾆｼﾞ", "3ds虹", "7ﾆｼﾞ", "7虹")),
    ("アムステルダムブルーム", Series.TOUR, ("bad", "ad", "amsterdam", "ｱﾑｽﾃﾙﾀﾞﾑﾌﾞﾙｰﾑ", "ｱﾑｽﾃﾙﾀﾞﾑ", "ｱﾑｽ", "ﾌﾞﾙｰﾑ")),
    ("リバーサイドパーク", Series.GBA, ("brp", "rp", "ﾘﾊﾞｰｻｲﾄﾞﾊﾟｰｸ", "ﾘﾊﾞｰｻｲﾄﾞ", "ﾘﾊﾞﾊﾟ")),
    ("DKスノーボードクロス", Series.WII, ("bdks", "dks", "summit", "dkｽﾉｰﾎﾞｰﾄﾞｸﾛｽ", "ｽﾉｰﾎﾞｰﾄﾞｸﾛｽ", "ｽﾉﾎﾞｸﾛｽ", "ｽﾉﾎﾞ")),
    ("ヨッシーアイランド", Series.NEW, ("byi", "yi", "ﾖｯｼｰｱｲﾗﾝﾄﾞ", "ﾖｼｱｲ")),
    ("バンコクラッシュ", Series.TOUR, ("bbr", "br", "bangkok", "ﾊﾞﾝｺｸﾗｯｼｭ", "ﾊﾞﾝｺｸ")),
    ("マリオサーキット", Series.DS, ("bmc", "dsﾏﾘｵｻｰｷｯﾄ", "dsﾏﾘｻ")),
    ("ワルイージスタジアム", Series.GC, ("bws", "ﾜﾙｲｰｼﾞｽﾀｼﾞｱﾑ", "ﾜﾙｽﾀ")),
    ("シンガポールスプラッシュ", Series.TOUR, ("bssy", "ssy", "bsis", "sis", "singapore", "ｼﾝｶﾞﾎﾟｰﾙｽﾌﾟﾗｯｼｭ", "ｼﾝｶﾞﾎﾟｰﾙ")),
    ("アテネポリス", Series.TOUR, ("bada", "ada", "athens", "ｱﾃﾈﾎﾟﾘｽ", "ｱﾃﾈ")),
    ("デイジークルーザー", Series.GC, ("bdc", "dc", "ﾃﾞｲｼﾞｰｸﾙｰｻﾞｰ", "ﾃﾞｲｸﾙ")),
    ("ムーンリッジ&ハイウェイ", Series.WII, ("bmh", "mh", "ﾑｰﾝﾘｯｼﾞ", "ﾑﾝﾊｲ", "ﾑｰﾝﾊｲ")),
    ("シャボンロード", Series.NEW, ("bscs", "scs", "ｼｬﾎﾞﾝﾛｰﾄﾞ", "ｼｬﾎﾞﾝ", "ｼｬﾎﾞﾛ")),
    ("ロサンゼルスコースト", Series.TOUR, ("blal", "lal", "losangeles", "los", "ﾛｻﾝｾﾞﾙｽｺｰｽﾄ", "ﾛｻﾝｾﾞﾙｽ", "ﾛｽ")),
    ("サンセットこうや", Series.GBA, ("bsw", "sw", "ｻﾝｾｯﾄｺｳﾔ", "ｻﾝｾｯﾄ", "ｺｳﾔ", "ｻﾝｾ")),
    ("ノコノコみさき", Series.WII, ("bkc", "kc", "ﾉｺﾉｺﾐｻｷ", "ﾉｺﾉｺ", "ﾉｺﾐｻ", "ﾉｺﾐ")),
    ("バンクーバーバレー", Series.TOUR, ("bvv", "vv", "vancouver", "ﾊﾞﾝｸｰﾊﾞｰﾊﾞﾚｰ", "ﾊﾞﾝｸｰﾊﾞｰ")),
    ("ローマアバンティ", Series.TOUR, ("bra", "ra", "rome", "ﾛｰﾏｱﾊﾞﾝﾃｨ", "ﾛｰﾏ")),
    ("DKマウンテン", Series.GC, ("bdkm", "dkm", "dkﾏｳﾝﾃﾝ", "dkﾔﾏ", "dk山")),
    ("デイジーサーキット", Series.WII, ("bdci", "dci", "ﾃﾞｲｼﾞｰｻｰｷｯﾄ", "ﾃﾞｲｻ")),
    ("パックンしんでん", Series.NEW, ("bppc", "ppc", "ﾊﾟｯｸﾝｼﾝﾃﾞﾝ", "ﾊﾟｸｼﾝ", "ｼﾝﾃﾞﾝ")),
    ("マドリードグランデ", Series.TOUR, ("bmd", "md", "madrid", "ﾏﾄﾞﾘｰﾄﾞｸﾞﾗﾝﾃﾞ", "ﾏﾄﾞﾘｰﾄﾞ")),
    ("ロゼッタプラネット", Series.THREE_DS, ("briw", "riw", "ﾛｾﾞｯﾀﾌﾟﾗﾈｯﾄ", "ﾛｾﾞﾌﾟﾗ")),
    ("クッパじょう3", Series.SFC, ("bbc3", "bc3", "ｸｯﾊﾟｼﾞｮｳ3", "ｸｯﾊﾟｼﾞｮｳ", "ｸｯﾊﾟ城")),
    ("レインボーロード", Series.WII, ("brr", "brrw", "rrw", "wiiﾆｼﾞ", "wiiﾚｲﾝﾎﾞｰﾛｰﾄﾞ", "wii虹", "ｳｨｰﾆｼﾞ")),
)


def _series_in(text: str) -> Optional[Series]:
    text = text.lower().strip()
    for token, series in SERIES_TOKENS:
        if token in text:
            return series
    return None


def is_course_candidate(word: Word, frame_height: int) -> bool:
    """
    Check whether an OCR fragment may be part of a course name.

    The fragment must sit in the bottom band of the frame and either be long
    enough to look like a course name or contain a series tag.

    Args:
        word: OCR fragment
        frame_height: Height of the frame the fragment came from

    Returns:
        True if the fragment should be passed to the resolver
    """
    if word.y < CANDIDATE_Y_RATIO * frame_height:
        return False
    if len(word.text) >= CANDIDATE_MIN_CHARS:
        return True
    return _series_in(word.text) is not None


class CourseCatalog:
    """
    Read-only course catalog with exact, nearest and alias lookups.

    Build one instance at startup and share it; nothing mutates it afterwards.
    """

    def __init__(self, data: Sequence[Tuple[str, Series, Sequence[str]]] = COURSE_DATA):
        self._courses: List[Course] = []
        self._aliases: Dict[str, str] = {}
        self._by_display: Dict[str, Course] = {}
        self._by_series: Dict[Series, Dict[str, Course]] = {series: {} for series in Series}

        for name, series, aliases in data:
            course = Course(name, series)
            display = str(course)
            self._courses.append(course)
            self._by_display[display] = course
            self._by_series[series][normalize(name)] = course
            for alias in aliases:
                self._aliases[alias] = display

        logger.debug(f"Course catalog built: {len(self._courses)} courses, {len(self._aliases)} aliases")

    @property
    def courses(self) -> List[Course]:
        """All courses in catalog order."""
        return list(self._courses)

    @property
    def aliases(self) -> Dict[str, str]:
        """Shorthand alias -> course display string."""
        return dict(self._aliases)

    def infer_series(self, words: Sequence[Word]) -> Series:
        """Series of the first word carrying a series tag, else Series.NEW."""
        for word in words:
            series = _series_in(word.text)
            if series is not None:
                return series
        return Series.NEW

    def resolve_exact(self, words: Sequence[Word]) -> Optional[Course]:
        """
        Look each normalized word up in the inferred series' name index.

        Returns:
            First course hit in word order, or None
        """
        index = self._by_series[self.infer_series(words)]
        for word in words:
            course = index.get(normalize(word.text.lower().strip()))
            if course is not None:
                return course
        return None

    def resolve_nearest(self, words: Sequence[Word], threshold: int) -> Optional[Course]:
        """
        Resolve the longest word to the closest course name of the inferred series.

        Args:
            words: Candidate OCR fragments
            threshold: Maximum accepted Levenshtein distance

        Returns:
            Closest course within threshold, or None
        """
        if not words:
            return None

        index = self._by_series[self.infer_series(words)]
        longest = max(words, key=lambda w: len(w.text))
        target = normalize(longest.text)

        best: Optional[Course] = None
        best_distance = threshold + 1
        for normalized_name, course in index.items():
            distance = Levenshtein.distance(target, normalized_name)
            if distance < best_distance:
                best = course
                best_distance = distance

        if best is not None:
            logger.debug(f"Nearest course for {longest.text!r}: {best} (distance {best_distance})")
        return best

    def from_display(self, text: str) -> Optional[Course]:
        """Course whose display string is text, or None."""
        return self._by_display.get(text.strip())

    def search(self, query: str) -> List[Course]:
        """
        Courses whose display string or one of whose aliases contains query.

        Matching is done on normalized text so "ﾏﾘｶｽ", "mks" and "まりお" all work.
        An empty query returns every course.
        """
        needle = normalize(query.strip())
        if not needle:
            return self.courses

        matched = set()
        for alias, display in self._aliases.items():
            if needle in normalize(alias):
                matched.add(display)
        return [
            course for course in self._courses
            if str(course) in matched or needle in normalize(str(course))
        ]
