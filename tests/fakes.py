"""Stand-ins for the external collaborators used across tests"""
import json
from types import SimpleNamespace
from typing import Dict, List


class FakeDictionary:
    def __init__(self, words, suggestions: Dict[str, List[str]] = None):
        self.words = set(words)
        self.suggestions = suggestions or {}

    def correct(self, word):
        return word in self.words

    def suggest(self, word):
        return list(self.suggestions.get(word, []))


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, content):
        self.chat = SimpleNamespace(completions=FakeCompletions(content))

    @property
    def calls(self):
        return self.chat.completions.calls


def generation_reply(**overrides) -> str:
    reply = {
        "article": "Ths blender is gud. Buy it at https://a.co/x today.",
        "seo": {
            "title": "Blender X review",
            "metaDescription": "An honest look at Blender X.",
            "keywords": ["blender x", "review"],
            "ogTitle": "Blender X review",
            "ogDescription": "An honest look at Blender X.",
        },
        "reviews": [
            {"reviewer": "Ana", "rating": 4, "summary": "Solid", "details": "Crushes ice well."},
            {"reviewer": "Rui", "rating": 5, "summary": "Great", "details": "Quiet and fast."},
        ],
        "discoverySchema": None,
        "imagePrompts": ["shot A", "shot B"],
    }
    reply.update(overrides)
    return json.dumps(reply)


PRODUCT_HTML = """
<html>
<head>
  <title>Blender X | Shop</title>
  <meta property="og:title" content="Blender  X  Pro">
  <meta name="description" content="A powerful kitchen blender.">
  <meta property="product:price:amount" content="499.90">
  <meta property="product:brand" content="MetaBrand">
</head>
<body>
  <span itemprop="brand">Acme</span>
  <img src="https://cdn.example.com/1.jpg">
  <img src="/relative.jpg">
  <img data-src="https://cdn.example.com/2.jpg">
  <img src="https://cdn.example.com/1.jpg">
  <ul class="product-highlights">
    <li>1200 W motor</li>
    <li>   </li>
    <li>Glass jar</li>
  </ul>
  <div itemprop="additionalProperty">
    <span itemprop="name">Capacity</span><span itemprop="value">1.5 L</span>
  </div>
  <table>
    <tr><th>Weight</th><td>3 kg</td></tr>
  </table>
</body>
</html>
"""
