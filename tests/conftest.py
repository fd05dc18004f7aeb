"""Pytest configuration and shared fixtures."""

import pytest
import requests

from lexlist.common.config import CrawlConfig
from lexlist.common.fetch import Transport
from lexlist.extract.page import CharacterPage


BASE_URL = "https://www.edbchinese.hk"

CHARACTER_PAGE_HTML = """
<html><head><title>小學學習字詞表</title></head><body>
<table class="info">
  <tr><td>部首</td><td>總筆畫數</td></tr>
  <tr><td>水部</td><td>4 畫</td></tr>
</table>
<table class="reading">
  <tr><td>粵語</td><td>普通話</td></tr>
  <tr>
    <td><span class="jyutping12"><strong>seoi2</strong></span></td>
    <td class="pinyin12"><strong>shuǐ</strong></td>
  </tr>
</table>
<iframe src="/lexlist_ch/stkdemo_js/6c34.html"></iframe>
<img src="/images/stroke/6c34.png" alt="筆順">
<table class="words">
  <tr><th>小學學習字詞表</th><th>學習階段</th></tr>
  <tr>
    <td class="ci">水果</td>
    <td><div class="pinyinGreen">shuǐguǒ</div><div class="jyutpingGreen">seoi2gwo2</div></td>
    <td>1</td>
  </tr>
  <tr>
    <td class="ci">水平</td>
    <td><div class="pinyinPurple">shuǐpíng</div><div class="jyutpingPurple">seoi2ping4</div></td>
    <td>2</td>
  </tr>
  <tr>
    <td class="ci">水果</td>
    <td><div class="pinyinGreen">shuǐguǒ</div><div class="jyutpingGreen">seoi2gwo2</div></td>
    <td>1</td>
  </tr>
</table>
<table><tr><td>附表一 四字詞語</td></tr></table>
<table><tr><td class="ci">水落石出<br>水深火熱</td></tr></table>
<table><tr><td>附表二 文言詞語</td></tr></table>
<table>
  <tr>
    <td class="ci">水之湄</td>
    <td><div class="pinyinGreen">shuǐzhīméi</div><div class="jyutpingGreen">seoi2zi1mei4</div></td>
  </tr>
</table>
<table><tr><td>附表五 音譯外來詞語</td></tr></table>
<table>
  <tr>
    <td class="ci">水泵</td>
    <td class="eng">pump</td>
    <td><div class="pinyinGreen">shuǐbèng</div><div class="jyutpingGreen">seoi2bam1</div></td>
  </tr>
</table>
</body></html>
"""

EXCLUDED_PAGE_HTML = """
<html><body>
<table class="info">
  <tr><td>部首</td><td>總筆畫數</td></tr>
  <tr><td>氵部</td><td>7 畫</td></tr>
</table>
<p>此字屬《常用字字形表》，而不入《香港小學學習字詞表》。</p>
<table>
  <tr><th>附表 小學學習字詞表</th></tr>
  <tr><td class="ci">沙灘</td><td>1</td></tr>
</table>
<table>
  <tr><th>小學學習字詞表</th></tr>
  <tr><td class="ci">沙漠</td><td>2</td></tr>
</table>
</body></html>
"""

# Labels 1, 2, 3 at frames 0, 24, 48; stroke blocks start at 24, 48 and 72.
ANIMATION_SCRIPT = """
(function (lib, img, cjs, ss, an) {
(lib.stroke = function(mode,startPosition,loop) {
	this.initialize(mode,startPosition,loop,{});

	// number
	this.text = new cjs.Text("1", "20px 'Arial'", "#FF0000");
	this.text.setTransform(10,10);

	this.timeline.addTween(cjs.Tween.get(this.text).wait(24).to({text:"2"},0).wait(24).to({text:"3"},0).wait(60));

	// guide
	this.shape = new cjs.Shape();
	this.shape.graphics.f("#999999").s().p("M0 0L100 100");
	this.shape.setTransform(50,50);

	this.shape_1 = new cjs.Shape();
	this.shape_1.graphics.f("#FF0000").s().p("M10 10L20 20");
	this.shape_1.setTransform(10.5,20);

	this.shape_2 = new cjs.Shape();
	this.shape_2.graphics.f("#FF0000").s().p("M20 20L30 30");
	this.shape_2.setTransform(11,21);

	this.shape_3 = new cjs.Shape();
	this.shape_3.graphics.f("#FF0000").s().p("M30 30L40 40");
	this.shape_3.setTransform(12,22);

	this.shape_4 = new cjs.Shape();
	this.shape_4.graphics.f("#000000").s().p("M40 40L50 50");
	this.shape_4.setTransform(-3.5,23);

	this.timeline.addTween(cjs.Tween.get({}).to({state:[]}).to({state:[{t:this.shape_1}]},24).to({state:[{t:this.shape_2}]},2).wait(100));
	this.timeline.addTween(cjs.Tween.get({}).to({state:[]}).to({state:[{t:this.shape_3}]},48).wait(100));
	this.timeline.addTween(cjs.Tween.get({}).to({state:[]}).to({state:[{t:this.shape_4}]},72).to({state:[{t:this.shape}]},1).wait(100));

}).prototype = p = new cjs.MovieClip();
})(lib = lib||{}, images = images||{}, createjs = createjs||{}, ss = ss||{}, AdobeAn = AdobeAn||{});
"""


class FakeTransport(Transport):
    """Serves canned bodies by URL; anything unknown fails like a dead connection."""
    name = "fake"

    def __init__(self, bodies=None):
        self.bodies = dict(bodies or {})
        self.calls = []

    def get(self, url, timeout):
        self.calls.append(url)
        body = self.bodies.get(url)
        if body is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(body, Exception):
            raise body
        return body


@pytest.fixture
def page_html():
    return CHARACTER_PAGE_HTML


@pytest.fixture
def excluded_page_html():
    return EXCLUDED_PAGE_HTML


@pytest.fixture
def page():
    """The parsed sample character page."""
    return CharacterPage(CHARACTER_PAGE_HTML)


@pytest.fixture
def excluded_page():
    """A page stating the character is outside the primary-school list."""
    return CharacterPage(EXCLUDED_PAGE_HTML)


@pytest.fixture
def animation_script():
    return ANIMATION_SCRIPT


@pytest.fixture
def test_config(tmp_path):
    """Provide a crawl configuration writing under tmp_path."""
    return CrawlConfig(
        records_dir=str(tmp_path / "characters"),
        indexes_dir=str(tmp_path / "indexes"),
    )


@pytest.fixture
def sleeps():
    """Recorded sleep calls; use .append as the sleep function."""
    return []


@pytest.fixture
def make_record_dict():
    """Factory fixture for stored record dicts with sensible defaults."""

    def _make(
        id="0001",
        character="水",
        radical="水",
        stroke_count=4,
        jyutping="seoi2",
        in_lexical_lists_hk=True,
        stage1_words=None,
        stage2_words=None,
    ):
        return {
            "id": id,
            "character": character,
            "sourceUrl": f"{BASE_URL}/lexlist_ch/result.jsp?id={id}&sortBy=ks&jpC=lshk",
            "radical": radical,
            "strokeCount": stroke_count,
            "jyutping": jyutping,
            "pinyin": "",
            "strokeOrderImages": [],
            "strokeVectors": [],
            "inLexicalListsHK": in_lexical_lists_hk,
            "stage1Words": stage1_words or [],
            "stage2Words": stage2_words or [],
            "fourCharacterPhrases": [],
            "classicalPhrases": [],
            "multiCharacterIdioms": [],
            "properNouns": [],
            "transliteratedWords": [],
        }

    return _make


@pytest.fixture
def make_transport():
    """Factory fixture for FakeTransport instances."""

    def _make(bodies=None):
        return FakeTransport(bodies)

    return _make
