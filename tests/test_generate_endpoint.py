import os
import threading
import unittest
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from review_studio.config import IMAGE_SERVICE_URL
from review_studio.main import app
from review_studio.services.dictionary import SharedResource
from review_studio.services.pipeline import PipelineContext, get_pipeline_context
from tests.fakes import PRODUCT_HTML, FakeDictionary, FakeOpenAI, generation_reply

PRODUCT_URL = "https://shop.example.com/blender-x"


def valid_body(**overrides):
    body = {
        "productUrl": PRODUCT_URL,
        "targetLocale": "en-US",
        "targetKeywords": "blender review",
        "outlineStyle": "listicle",
        "tone": "friendly",
        "callToAction": "Get yours today",
        "geoPersona": "US home cook",
        "includeDiscoverySchema": True,
        "affiliateLinks": {"amazon": "https://a.co/x"},
    }
    body.update(overrides)
    return body


class TestGenerateEndpoint(unittest.TestCase):
    def setUp(self):
        env = patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("NANO_BANANA_API_KEY", None)

        self.page_requests = []

        def handler(request):
            self.page_requests.append(request)
            return httpx.Response(200, text=PRODUCT_HTML, headers={"content-type": "text/html"})

        self.openai = FakeOpenAI(generation_reply())
        dictionary = FakeDictionary(
            ["this", "blender", "is", "good", "buy", "it", "at", "today", "https", "a", "co", "x"],
            {"ths": ["this"], "gud": ["good"]},
        )
        self.context = PipelineContext(
            dictionary=SharedResource(lambda: dictionary),
            openai_client=self.openai,
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_pipeline_context] = lambda: self.context
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def test_full_response(self):
        response = self.client.post("/api/generate", json=valid_body())
        self.assertEqual(response.status_code, 200)
        data = response.json()

        self.assertEqual(
            set(data),
            {"article", "seo", "product", "reviews", "affiliateLinks", "discoverySchema", "images", "spellcheck"},
        )
        self.assertTrue(data["article"].startswith("This blender is good."))
        self.assertEqual(
            data["spellcheck"]["corrections"],
            [{"original": "Ths", "suggestion": "This"}, {"original": "gud", "suggestion": "good"}],
        )
        self.assertEqual(data["product"]["title"], "Blender X Pro")
        self.assertEqual(data["product"]["sourceUrl"], PRODUCT_URL)
        self.assertEqual(data["affiliateLinks"]["amazon"], "https://a.co/x")
        self.assertEqual(data["affiliateLinks"]["braip"], "")
        self.assertEqual(data["discoverySchema"]["aggregateRating"]["ratingValue"], "4.5")
        self.assertEqual(data["discoverySchema"]["isRelatedTo"], {"amazon": "https://a.co/x"})
        self.assertEqual([image["prompt"] for image in data["images"]], ["shot A", "shot B"])
        self.assertEqual(len(self.openai.calls), 1)

    def test_schema_null_when_not_requested(self):
        response = self.client.post("/api/generate", json=valid_body(includeDiscoverySchema=False))
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["discoverySchema"])

    def test_default_image_prompts_when_model_supplies_none(self):
        self.openai.chat.completions.content = generation_reply(imagePrompts=[])
        response = self.client.post("/api/generate", json=valid_body())
        images = response.json()["images"]
        self.assertEqual(len(images), 2)
        self.assertEqual(images[0]["prompt"], "Blender X Pro hero shot, Product hero shot, cinematic lighting")

    def test_product_url_is_kept_as_sent(self):
        response = self.client.post("/api/generate", json=valid_body(productUrl="https://shop.example.com"))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["product"]["sourceUrl"], "https://shop.example.com")
        self.assertEqual(data["discoverySchema"]["offers"]["url"], "https://shop.example.com")

    def test_reviews_echo_integer_ratings(self):
        response = self.client.post("/api/generate", json=valid_body())
        self.assertEqual([review["rating"] for review in response.json()["reviews"]], [4, 5])
        self.assertIn('"rating":4,', response.text)

    def test_unreachable_page_still_generates(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        self.context.transport = httpx.MockTransport(handler)
        response = self.client.post("/api/generate", json=valid_body())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["product"], {"sourceUrl": PRODUCT_URL})

    def test_malformed_url_is_rejected_before_any_work(self):
        response = self.client.post("/api/generate", json=valid_body(productUrl="not a url"))
        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertFalse(data["success"])
        self.assertTrue(data["details"])
        self.assertEqual(self.page_requests, [])
        self.assertEqual(self.openai.calls, [])

    def test_short_fields_and_non_boolean_flag_are_rejected(self):
        response = self.client.post(
            "/api/generate",
            json=valid_body(targetLocale="e", tone="ok", includeDiscoverySchema="yes"),
        )
        self.assertEqual(response.status_code, 400)
        locations = {tuple(error["loc"]) for error in response.json()["details"]}
        self.assertIn(("body", "targetLocale"), locations)
        self.assertIn(("body", "tone"), locations)
        self.assertIn(("body", "includeDiscoverySchema"), locations)

    def test_missing_affiliate_links_is_rejected(self):
        body = valid_body()
        del body["affiliateLinks"]
        response = self.client.post("/api/generate", json=body)
        self.assertEqual(response.status_code, 400)

    def test_other_methods_not_allowed(self):
        response = self.client.get("/api/generate")
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.headers["allow"], "POST")

    def test_missing_openai_credential_is_server_error(self):
        self.context.openai_client = None
        os.environ.pop("OPENAI_API_KEY", None)
        response = self.client.post("/api/generate", json=valid_body())
        self.assertEqual(response.status_code, 500)
        self.assertIn("OPENAI_API_KEY", response.json()["error"])

    def test_unparseable_generation_is_server_error(self):
        self.openai.chat.completions.content = "not json"
        response = self.client.post("/api/generate", json=valid_body())
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Could not parse generation response.")


class WaitingDictionary(FakeDictionary):
    """Holds the first suggestion lookup until the image request has been sent"""

    def __init__(self, image_requested, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.image_requested = image_requested
        self.image_sent_during_spellcheck = None

    def suggest(self, word):
        if self.image_sent_during_spellcheck is None:
            self.image_sent_during_spellcheck = self.image_requested.wait(timeout=5)
        return super().suggest(word)


class TestSpellcheckAlongsideImages(unittest.TestCase):
    def setUp(self):
        env = patch.dict(os.environ, {"NANO_BANANA_API_KEY": "test-key"})
        env.start()
        self.addCleanup(env.stop)
        self.addCleanup(app.dependency_overrides.clear)

    def test_image_request_is_sent_while_spellcheck_runs(self):
        image_requested = threading.Event()

        def handler(request):
            if str(request.url) == IMAGE_SERVICE_URL:
                image_requested.set()
                return httpx.Response(200, json={"images": [{"url": "https://img.example/1.png"}]})
            return httpx.Response(200, text=PRODUCT_HTML, headers={"content-type": "text/html"})

        dictionary = WaitingDictionary(
            image_requested,
            ["this", "blender", "is", "good", "buy", "it", "at", "today"],
            {"ths": ["this"], "gud": ["good"]},
        )
        context = PipelineContext(
            dictionary=SharedResource(lambda: dictionary),
            openai_client=FakeOpenAI(generation_reply()),
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_pipeline_context] = lambda: context

        response = TestClient(app).post("/api/generate", json=valid_body())

        self.assertEqual(response.status_code, 200)
        self.assertTrue(dictionary.image_sent_during_spellcheck)
        self.assertTrue(response.json()["article"].startswith("This blender is good."))
        self.assertEqual(response.json()["images"][0]["url"], "https://img.example/1.png")


class TestHealth(unittest.TestCase):
    def test_healthz(self):
        response = TestClient(app).get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
