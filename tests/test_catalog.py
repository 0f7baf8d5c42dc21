"""Behaviour every agent in the catalog shares, checked against the registry."""
import json

import pytest
from pydantic import BaseModel

from agents.api_builder import parse_api_code
from agents.api_docs_agent import parse_api_docs
from agents.cloud_cost_agent import parse_cost_report
from agents.code_diagram import parse_diagram_response
from agents.code_fix_agent import parse_code_analysis
from agents.cold_outreach_agent import parse_outreach
from agents.contract_auditor import parse_contract_audit
from agents.crypto_sentiment_agent import parse_sentiment
from agents.data_cleaner import parse_cleaning_plan
from agents.dockerizer_agent import parse_docker_config
from agents.eda_agent import parse_insights
from agents.email_gen import parse_email
from agents.financial_report_agent import parse_financial_report
from agents.image_caption import parse_captions
from agents.image_gen_agent import parse_image_spec
from agents.log_anomaly_agent import parse_log_analysis
from agents.market_watch import parse_market_analysis
from agents.meet_scribe import parse_meeting_analysis
from agents.n8n_architect import parse_workflow_json
from agents.news_summarizer import parse_summary_sections
from agents.pdf_extractor import parse_structured_json
from agents.personal_agent import parse_assistant_response
from agents.readme_architect import parse_readme
from agents.regex_generator import parse_regex_response
from agents.research_agent import parse_research_report
from agents.resume_opt import parse_optimization
from agents.seo_writer import parse_seo_content
from agents.social_manager import parse_social_posts
from agents.sql_generator import parse_sql_response
from agents.sql_teacher import parse_explanation
from agents.terraform_agent import parse_terraform
from agents.trading_backtester import parse_backtest
from agents.translator import parse_translation
from agents.ux_audit import parse_ux_audit
from agents.workflow_builder import parse_workflow
from core import registry
from core.exceptions import LLMError
from fakes import (
    FakeDescriber,
    FakeGenerator,
    FakeLLM,
    FakeMailer,
    FakeMarketData,
    FakeSynthesizer,
    FakeTranscriber,
    FakeYouTubeClient,
    make_video,
)
from tools.assistant_store import AssistantMemory
from tools.knowledge_store import KnowledgeStore
from tools.step_executor import DryRunStepExecutor

SALES = "region,units,price\nNorth,10,2.5\nSouth,20,5.0\nNorth,30,7.5\n"
BILLING = 'service,cost\nEC2,"$1,200.00"\nS3,300\n'
PRICES = "date,close\n2024-01-01,100\n2024-01-02,105\n2024-01-03,110\n"


def _knowledge_store():
    store = KnowledgeStore(chunk_size=100)
    store.add_document("Our refund policy allows returns within 30 days", {"title": "Refunds"})
    return store


def _csv_file(tmp_path):
    path = tmp_path / "people.csv"
    path.write_text("name,age\nAlice,30\nBob,\n")
    return str(path)


# slug -> (injected services, valid input built from tmp_path)
AGENT_CASES = {
    "api_builder": (None, lambda tmp: {"description": "User CRUD API"}),
    "api_docs_agent": (None, lambda tmp: {"code_file": "app.get('/users', (req, res) => res.json([]))"}),
    "cicd_agent": (None, lambda tmp: {"project_description": "Node API deployed to Fly.io"}),
    "cloud_cost_agent": (None, lambda tmp: {"billing_file": BILLING}),
    "code_diagram": (None, lambda tmp: {"code": "class A:\n    pass\n"}),
    "code_fix_agent": (None, lambda tmp: {"code_snippet": "def f(x):\n    return x +\n"}),
    "cold_outreach_agent": (None, lambda tmp: {"company_url": "https://acme.io", "offer": "Faster CI"}),
    "contract_auditor": (None, lambda tmp: {"contract_content": "The vendor shall indemnify the client."}),
    "crypto_sentiment_agent": ("market_data", lambda tmp: {"coin_symbol": "BTC"}),
    "data_cleaner": (None, lambda tmp: {"csv_file": _csv_file(tmp)}),
    "dockerizer_agent": (None, lambda tmp: {"code_snippet": "print('hi')"}),
    "eda_agent": (None, lambda tmp: {"csv_upload": SALES}),
    "email_gen": ("mailer", lambda tmp: {"purpose": "Follow up on the invoice"}),
    "financial_report_agent": (None, lambda tmp: {"pdf_content": "Revenue was $4.2B."}),
    "image_caption": ("describer", lambda tmp: {"image_file": "A dog on a beach"}),
    "image_gen_agent": ("generator", lambda tmp: {"prompt": "lighthouse at dusk"}),
    "kb_agent": ("store", lambda tmp: {"query": "refund policy"}),
    "log_anomaly_agent": (None, lambda tmp: {"log_text": "ERROR db timeout\nINFO retry ok"}),
    "market_watch": ("market_data", lambda tmp: {"symbol": "BTCUSDT"}),
    "meet_scribe": ("transcriber", lambda tmp: {"transcript": "We agreed to launch on Friday."}),
    "n8n_architect": (None, lambda tmp: {"goal": "Post the weather to Slack every morning"}),
    "news_summarizer": (None, lambda tmp: {"text_or_file": "The city opened a new park on Monday."}),
    "pdf_extractor": (None, lambda tmp: {"pdf_file": "Quarterly report text"}),
    "personal_agent": ("memory", lambda tmp: {"query": "Any tips?"}),
    "readme_architect": (None, lambda tmp: {"repo_url": "https://github.com/acme/widget"}),
    "regex_generator": (None, lambda tmp: {"requirement": "US ZIP codes"}),
    "research_agent": (None, lambda tmp: {"topic": "AI agents"}),
    "resume_opt": (None, lambda tmp: {"resume_text": "Python developer", "job_description": "Senior Python engineer"}),
    "seo_writer": (None, lambda tmp: {"keyword": "remote work"}),
    "social_manager": (None, lambda tmp: {
        "content_topic": "remote work",
        "platform": "LinkedIn",
        "target_audience": "team leads",
    }),
    "sql_generator": (None, lambda tmp: {"question": "How many users?", "schema": "users(id, name)"}),
    "sql_teacher": (None, lambda tmp: {"sql_query": "SELECT 1"}),
    "terraform_agent": (None, lambda tmp: {"infrastructure_description": "A static site bucket"}),
    "trading_backtester": (None, lambda tmp: {"strategy_logic": "Buy above the 20-day SMA", "csv_data": PRICES}),
    "translator": (None, lambda tmp: {"text": "Hello", "target_language": "spanish"}),
    "ux_audit": (None, lambda tmp: {"screenshot_or_url": "https://shop.test"}),
    "voice_assistant": ("voice", lambda tmp: {"text": "What's the weather?"}),
    "workflow_builder": ("executor", lambda tmp: {"trigger": "New lead"}),
    "youtube_finder": ("client", lambda tmp: {"query": "linear algebra"}),
}

SERVICES = {
    "market_data": lambda: {"market_data": FakeMarketData()},
    "mailer": lambda: {"mailer": FakeMailer()},
    "describer": lambda: {"describer": FakeDescriber()},
    "generator": lambda: {"generator": FakeGenerator()},
    "store": lambda: {"store": _knowledge_store()},
    "transcriber": lambda: {"transcriber": FakeTranscriber()},
    "memory": lambda: {"memory": AssistantMemory()},
    "voice": lambda: {"transcriber": FakeTranscriber(), "synthesizer": FakeSynthesizer()},
    "executor": lambda: {"executor": DryRunStepExecutor()},
    "client": lambda: {"client": FakeYouTubeClient([make_video("a")])},
}


def build(slug, llm):
    services, _ = AGENT_CASES[slug]
    extra = SERVICES[services]() if services else {}
    return registry.get_agent_class(slug)(llm=llm, **extra)


def test_every_catalog_agent_has_a_case():
    assert sorted(AGENT_CASES) == sorted(registry.AGENTS)


@pytest.mark.parametrize("slug", sorted(registry.AGENTS))
async def test_missing_input_is_rejected_before_any_call(slug):
    llm = FakeLLM("unused")
    agent_class = registry.get_agent_class(slug)

    envelope = (await build(slug, llm).run({})).to_envelope()

    assert envelope["success"] is False
    assert envelope["error"]
    assert not envelope["error"].startswith(agent_class.failure_context)
    assert {key: envelope[key] for key in agent_class.payload_keys} == dict.fromkeys(agent_class.payload_keys)
    assert llm.calls == []


@pytest.mark.parametrize("slug", sorted(set(registry.AGENTS) - {"youtube_finder"}))
async def test_provider_errors_carry_the_failure_context(slug, tmp_path):
    llm = FakeLLM(LLMError("boom"))
    agent_class = registry.get_agent_class(slug)

    envelope = (await build(slug, llm).run(AGENT_CASES[slug][1](tmp_path))).to_envelope()

    assert envelope["success"] is False
    assert envelope["error"] == f"{agent_class.failure_context}: boom"
    assert {key: envelope[key] for key in agent_class.payload_keys} == dict.fromkeys(agent_class.payload_keys)
    assert len(llm.calls) == 1


async def test_youtube_finder_searches_anyway_when_the_provider_fails():
    client = FakeYouTubeClient([make_video("a")])
    agent = registry.get_agent_class("youtube_finder")(llm=FakeLLM(LLMError("boom")), client=client)

    envelope = (await agent.run({"query": "linear algebra"})).to_envelope()

    assert envelope["success"] is True
    assert client.searches[0]["query"] == "linear algebra"


# n8n_architect only accepts a JSON workflow, so plain text is a failure there
@pytest.mark.parametrize("slug", sorted(set(registry.AGENTS) - {"n8n_architect"}))
async def test_unstructured_reply_still_fills_the_payload(slug, tmp_path):
    llm = FakeLLM("Nothing useful here.")
    agent_class = registry.get_agent_class(slug)

    envelope = (await build(slug, llm).run(AGENT_CASES[slug][1](tmp_path))).to_envelope()

    assert envelope["success"] is True, envelope.get("error")
    present = [key for key in agent_class.payload_keys if key in envelope]
    assert present
    assert all(envelope[key] is not None for key in present)


def _plain(value):
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


REPORT = """# Report
## Summary
The main point is that things went well.
## Key Points
- First finding with detail
- Second finding with detail
1. A numbered item
Post 1: Launch day is here and the team is ready
Hashtags: #launch #team
Subject: Quarterly update
```sql
SELECT 1;
```
Confidence: high
"""

PARSERS = [
    ("parse_api_code", lambda text: parse_api_code(text, "express", "javascript")),
    ("parse_api_docs", parse_api_docs),
    ("parse_cost_report", parse_cost_report),
    ("parse_diagram_response", lambda text: parse_diagram_response(text, "mermaid")),
    ("parse_code_analysis", parse_code_analysis),
    ("parse_outreach", lambda text: parse_outreach(text, "https://acme.io")),
    ("parse_contract_audit", parse_contract_audit),
    ("parse_sentiment", parse_sentiment),
    ("parse_cleaning_plan", parse_cleaning_plan),
    ("parse_docker_config", parse_docker_config),
    ("parse_insights", parse_insights),
    ("parse_email", lambda text: parse_email(text, "say hi", "friendly")),
    ("parse_financial_report", parse_financial_report),
    ("parse_captions", lambda text: parse_captions(text, 3, True)),
    ("parse_image_spec", lambda text: parse_image_spec(text, "lighthouse")),
    ("parse_log_analysis", parse_log_analysis),
    ("parse_market_analysis", parse_market_analysis),
    ("parse_meeting_analysis", parse_meeting_analysis),
    ("parse_summary_sections", parse_summary_sections),
    ("parse_structured_json", parse_structured_json),
    ("parse_assistant_response", parse_assistant_response),
    ("parse_readme", lambda text: parse_readme(text, "https://github.com/acme/widget")),
    ("parse_regex_response", parse_regex_response),
    ("parse_research_report", lambda text: parse_research_report(text, "AI agents")),
    ("parse_optimization", lambda text: parse_optimization(text, "Python developer")),
    ("parse_seo_content", lambda text: parse_seo_content(text, "remote work")),
    ("parse_social_posts", lambda text: parse_social_posts(text, "LinkedIn", 3)),
    ("parse_sql_response", parse_sql_response),
    ("parse_explanation", parse_explanation),
    ("parse_terraform", parse_terraform),
    ("parse_backtest", parse_backtest),
    ("parse_translation", lambda text: parse_translation(text, "spanish")),
    ("parse_ux_audit", parse_ux_audit),
    ("parse_workflow", lambda text: parse_workflow(text, "New lead")),
]


@pytest.mark.parametrize("text", [REPORT, "Nothing useful here.", ""], ids=["report", "prose", "empty"])
@pytest.mark.parametrize("name, parse", PARSERS, ids=[name for name, _ in PARSERS])
def test_parsing_the_same_reply_twice_gives_the_same_result(name, parse, text):
    assert _plain(parse(text)) == _plain(parse(text))


def test_parse_workflow_json_is_repeatable():
    text = "```json\n" + json.dumps({"name": "w", "nodes": [], "connections": {}}) + "\n```"

    assert parse_workflow_json(text) == parse_workflow_json(text)
