"""Tests for agents that pair the LLM with market data, memory, speech, workflows or video search."""
import pytest

from agents.market_watch import MarketWatchAgent, parse_market_analysis
from agents.news_summarizer import NewsSummarizerAgent, parse_summary_sections
from agents.personal_agent import PersonalAgent, normalize_action, parse_assistant_response
from agents.research_agent import DEFAULT_FINDINGS, ResearchAgent, parse_research_report
from agents.resume_opt import ResumeOptAgent, parse_optimization
from agents.seo_writer import SEOWriterAgent, keyword_density, parse_seo_content
from agents.social_manager import SocialManagerAgent, parse_social_posts
from agents.sql_teacher import DEFAULT_OVERVIEW, DEFAULT_STEPS, EXPERT_GUIDANCE, SQLTeacherAgent, parse_explanation
from agents.ux_audit import UXAuditAgent, describe_target, parse_ux_audit
from agents.voice_assistant import VoiceAssistantAgent
from agents.workflow_builder import WorkflowBuilderAgent, load_definition, parse_workflow
from agents.youtube_finder import YouTubeFinderAgent, clean_enhanced_query, filter_videos
from core.exceptions import LLMError, ServiceError
from fakes import (
    FailingExecutor,
    FakeLLM,
    FakeMarketData,
    FakeSynthesizer,
    FakeTranscriber,
    FakeYouTubeClient,
    make_video,
)
from tools.assistant_store import AssistantMemory

MARKET_RESPONSE = """Sentiment: Bullish
Signals:
- Buy on pullbacks toward the 20-day SMA
Risk Level: Medium
Support and resistance: $95 / $110
Outlook: Uptrend likely continues"""

SUMMARY_RESPONSE = """## Executive Summary
The central bank held rates steady while signalling cuts later this year.
## Key Insights
- Inflation is cooling faster than expected
- Markets rallied on the news
## Actionable Takeaways
- Review variable-rate debt"""

ASSISTANT_RESPONSE = """Action: schedule_meeting
Response: Your design review is booked.
Data:
- title: Design review
- date: 2024-06-03
- time: 14:00
- attendees: a, b
Follow-up: no
Suggestions:
- Share the agenda beforehand"""

RESEARCH_RESPONSE = """## Executive Summary
AI adoption is accelerating across industries.
## Key Findings
- Adoption doubled since 2022
## Detailed Analysis
- Trends: Agents are moving into production
- Risks: Governance lags deployment
## Recommendations
- Start with narrow pilots"""

RESUME_RESPONSE = """## Optimized Resume
```
JANE DOE
SUMMARY
Backend engineer with 8 years of Python.
EXPERIENCE
Acme Corp
```
## ATS Suggestions
- Use standard section headings
## Keyword Analysis
- Python, AWS and Kubernetes are covered
## Improvements
- Quantified the impact of each role"""

SEO_RESPONSE = """SEO Title: Remote Work Guide for Teams
Meta Description: How to make remote work succeed.
# Making Remote Work Work
## Introduction
Remote work is here to stay for many teams.
## Tools That Help
Pick a chat tool and a shared calendar.
## Conclusion
Remote work rewards clear habits.
## Internal Links
- /blog/async-meetings
## External Links
- https://example.com/remote-study"""

SOCIAL_RESPONSE = """Post 1: Kick off the week with three quick focus tips for remote teams
Hashtags: #remote #focus
Best time: Monday 9 AM
Engagement: Ask followers for their favourite tip
Visual: Desk setup photo
Post 2
Text: Our async stand-up template is free to download
#async #templates
Overall Strategy: Alternate tips with resources."""

SQL_RESPONSE = """## What the Query Does
It lists customers with more than five orders.
## Step-by-Step Breakdown
1. FROM customers joins orders
2. GROUP BY groups rows per customer
## Key Concepts
- HAVING filters groups
## Performance Notes
- Index orders.customer_id"""

UX_RESPONSE = """## Accessibility Issues
- [High] - Images are missing alt text on the product grid
- Low contrast on secondary buttons
## Usability Issues
- Critical: Checkout hides the shipping cost until the last step
## Top 5 Recommendations
- Add alt text to every product image
Accessibility Score: 62/100
Usability Score: 71
Overall Score: 65%"""

WORKFLOW_JSON = (
    '{"name": "Lead intake", "steps": ["Save the lead to the database", {"action": "Send welcome email"}], '
    '"conditions": ["If lead score > 50"]}'
)


# market_watch

def test_parse_market_analysis_classifies_lines():
    analysis = parse_market_analysis(MARKET_RESPONSE)

    assert analysis.sentiment == "bullish"
    assert analysis.signals == ["Buy on pullbacks toward the 20-day SMA"]
    assert analysis.risk_level == "medium"
    assert analysis.support_resistance == "Support and resistance: $95 / $110"
    assert analysis.outlook == "Outlook: Uptrend likely continues"


def test_parse_market_analysis_defaults():
    analysis = parse_market_analysis("nothing useful")

    assert analysis.sentiment == "neutral"
    assert analysis.signals == []
    assert analysis.outlook == "Market analysis unavailable"


async def test_market_watch_combines_snapshot_and_indicators():
    llm = FakeLLM(MARKET_RESPONSE)
    market_data = FakeMarketData(count=60)

    envelope = (await MarketWatchAgent(llm=llm, market_data=market_data).run({"symbol": " btcusdt "})).to_envelope()

    assert envelope["success"] is True
    assert market_data.symbols == ["BTCUSDT"]
    assert envelope["symbol"] == "BTCUSDT"
    assert envelope["market_data"]["current_price"] == 159.0
    assert envelope["market_data"]["indicators"]["sma_20"] == 149.5
    assert envelope["market_data"]["indicators"]["rsi"] == 100.0
    assert envelope["analysis"]["sentiment"] == "bullish"
    assert "$149.50" in llm.prompt


async def test_market_watch_reports_data_failure():
    llm = FakeLLM()
    agent = MarketWatchAgent(llm=llm, market_data=FakeMarketData(error=ServiceError("Binance API error: 400")))

    envelope = (await agent.run({"symbol": "NOPE"})).to_envelope()

    assert envelope == {
        "success": False,
        "error": "Market analysis failed: Binance API error: 400",
        "market_data": None,
        "analysis": None,
    }
    assert llm.calls == []


async def test_market_watch_requires_symbol():
    envelope = (await MarketWatchAgent(llm=FakeLLM(), market_data=FakeMarketData()).run({})).to_envelope()

    assert envelope["error"] == "Trading symbol is required (e.g., BTCUSDT, AAPL)"


# news_summarizer

def test_parse_summary_sections():
    sections = parse_summary_sections(SUMMARY_RESPONSE)

    assert sections["overview"] == "The central bank held rates steady while signalling cuts later this year."
    assert sections["key_points"] == ["Inflation is cooling faster than expected", "Markets rallied on the news"]
    assert sections["takeaways"] == ["Review variable-rate debt"]
    assert sections["analysis"] == []


def test_parse_summary_sections_falls_back_to_first_long_line():
    sections = parse_summary_sections("Short.\nThis line is long enough to become the overview of the summary.")

    assert sections["overview"] == "This line is long enough to become the overview of the summary."


async def test_news_summarizer_reads_text_file(tmp_path):
    article = tmp_path / "article.txt"
    article.write_text("Rates were held steady today.")
    llm = FakeLLM(SUMMARY_RESPONSE)

    envelope = (await NewsSummarizerAgent(llm=llm).run({"text_or_file": str(article)})).to_envelope()

    assert envelope["success"] is True
    assert envelope["summary"] == SUMMARY_RESPONSE
    assert envelope["metadata"] == {
        "source_file": "article.txt",
        "original_length": len("Rates were held steady today."),
        "insights_generated": 3,
    }
    assert "Rates were held steady today." in llm.prompt


async def test_news_summarizer_rejects_pdf(tmp_path):
    pdf = tmp_path / "report.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    llm = FakeLLM()

    envelope = (await NewsSummarizerAgent(llm=llm).run({"text_or_file": str(pdf)})).to_envelope()

    assert envelope["success"] is False
    assert envelope["error"] == "PDF files are not supported here; provide the text content instead"
    assert envelope["summary"] is None
    assert llm.calls == []


# personal_agent

def test_parse_assistant_response():
    parsed = parse_assistant_response(ASSISTANT_RESPONSE)

    assert parsed.action == "schedule_meeting"
    assert parsed.message == "Your design review is booked."
    assert parsed.data == {"title": "Design review", "date": "2024-06-03", "time": "14:00", "attendees": "a, b"}
    assert parsed.follow_up is False
    assert parsed.suggestions == ["Share the agenda beforehand"]


def test_normalize_action_maps_aliases():
    assert normalize_action("Creating Task") == "create_task"
    assert normalize_action("**check_calendar**") == "check_calendar"
    assert normalize_action("") == "general_assistance"


async def test_personal_agent_remembers_between_requests():
    memory = AssistantMemory()
    llm = FakeLLM(ASSISTANT_RESPONSE, "Action: check_calendar\nResponse: Here is your week.")
    agent = PersonalAgent(llm=llm, memory=memory)

    first = (await agent.run({"request": "Book a design review on June 3rd at 2pm", "user_id": "u1"})).to_envelope()
    second = (await agent.run({"query": "What is on my calendar?", "user_id": "u1"})).to_envelope()

    assert first["success"] is True
    assert first["action_taken"] == "schedule_meeting"
    meeting = first["executed_actions"][0]["result"]
    assert meeting["title"] == "Design review"
    assert meeting["attendees"] == ["a", "b"]

    assert "Meeting: Design review on 2024-06-03 at 14:00" in llm.prompt
    assert second["action_taken"] == "check_calendar"
    assert len(second["executed_actions"][0]["result"]["meetings"]) == 1
    assert second["response"]["message"] == "Here is your week."


async def test_personal_agent_general_request_executes_nothing():
    envelope = (await PersonalAgent(llm=FakeLLM("Just some advice.")).run({"query": "Any tips?"})).to_envelope()

    assert envelope["action_taken"] == "general_assistance"
    assert envelope["executed_actions"] == []
    assert envelope["user_id"] == "default"
    assert envelope["response"]["message"] == "Just some advice."


async def test_personal_agent_requires_query():
    envelope = (await PersonalAgent(llm=FakeLLM()).run({})).to_envelope()

    assert envelope["error"] == "Query is required"


# research_agent

def test_parse_research_report_routes_analysis_items():
    report = parse_research_report(RESEARCH_RESPONSE, "AI agents")

    assert report.executive_summary == "AI adoption is accelerating across industries."
    assert report.key_findings == ["Adoption doubled since 2022"]
    assert report.detailed_analysis.trends == ["Trends: Agents are moving into production"]
    assert report.detailed_analysis.challenges == ["Risks: Governance lags deployment"]
    assert report.recommendations == ["Start with narrow pilots"]


def test_parse_research_report_defaults_mention_topic():
    report = parse_research_report("Nothing", "solar power")

    assert "solar power" in report.executive_summary
    assert report.key_findings == DEFAULT_FINDINGS


async def test_research_agent_accepts_prompt_alias():
    llm = FakeLLM(RESEARCH_RESPONSE)

    envelope = (await ResearchAgent(llm=llm).run({"prompt": "AI agents", "depth": "brief"})).to_envelope()

    assert envelope["success"] is True
    assert envelope["topic"] == "AI agents"
    assert envelope["depth"] == "brief"
    assert envelope["sources_analyzed"] == 5
    assert "Focus on key highlights" in llm.prompt


async def test_research_agent_requires_topic():
    envelope = (await ResearchAgent(llm=FakeLLM()).run({"topic": "  "})).to_envelope()

    assert envelope == {"success": False, "error": "Research topic is required", "report": None}


# resume_opt

def test_parse_optimization_scores_complete_response():
    optimization = parse_optimization(RESUME_RESPONSE, "original")

    assert optimization.content.startswith("JANE DOE\nSUMMARY")
    assert optimization.ats_suggestions == ["Use standard section headings"]
    assert optimization.keyword_analysis == ["Python, AWS and Kubernetes are covered"]
    assert optimization.improvements == ["Quantified the impact of each role"]
    assert optimization.ats_score == 100


def test_parse_optimization_falls_back_to_original():
    optimization = parse_optimization("No changes.", "ORIGINAL RESUME")

    assert optimization.content == "ORIGINAL RESUME"
    assert optimization.ats_score == 60
    assert optimization.improvements == ["Unable to generate optimized content - using original"]


async def test_resume_opt_reads_resume_file(tmp_path):
    resume = tmp_path / "resume.txt"
    resume.write_text("Jane Doe\nEngineer")
    llm = FakeLLM(RESUME_RESPONSE)

    envelope = (await ResumeOptAgent(llm=llm).run({
        "resume_file": str(resume),
        "job_description": "Senior Python engineer",
    })).to_envelope()

    assert envelope["success"] is True
    assert envelope["original_length"] == len("Jane Doe\nEngineer")
    assert envelope["optimized_length"] == len(envelope["optimized_resume"]["content"])
    assert "Senior Python engineer" in llm.prompt
    assert "Jane Doe" in llm.prompt


@pytest.mark.parametrize("input_data, message", [
    ({"job_description": "x"}, "Resume file path is required"),
    ({"resume_text": "Jane"}, "Job description is required"),
])
async def test_resume_opt_validation(input_data, message):
    envelope = (await ResumeOptAgent(llm=FakeLLM()).run(input_data)).to_envelope()

    assert envelope["error"] == message


# seo_writer

def test_parse_seo_content():
    content = parse_seo_content(SEO_RESPONSE, "remote work")

    assert content.seo_title == "Remote Work Guide for Teams"
    assert content.meta_description == "How to make remote work succeed."
    assert content.h1 == "Making Remote Work Work"
    assert content.introduction == "Remote work is here to stay for many teams."
    assert [section.title for section in content.sections] == ["Tools That Help"]
    assert content.conclusion == "Remote work rewards clear habits."
    assert content.internal_links == ["/blog/async-meetings"]
    assert content.external_links == ["https://example.com/remote-study"]
    assert content.word_count == 22
    assert content.keyword_density == 9.09


def test_parse_seo_content_fallbacks():
    content = parse_seo_content("Just prose about python.", "python")

    assert content.seo_title == "Python: A Complete Guide"
    assert content.h1 == "Python: A Complete Guide"
    assert content.introduction == "Just prose about python."
    assert content.keyword_density == 25.0


def test_keyword_density_edge_cases():
    assert keyword_density("", "python") == 0.0
    assert keyword_density("some words", " ") == 0.0


async def test_seo_writer_adds_secondary_keywords():
    llm = FakeLLM(SEO_RESPONSE)

    envelope = (await SEOWriterAgent(llm=llm).run({
        "topic": "remote work",
        "keywords": "async, hybrid",
    })).to_envelope()

    assert envelope["success"] is True
    assert envelope["keyword"] == "remote work"
    assert "Also work in these secondary keywords: async, hybrid." in llm.prompt


async def test_seo_writer_requires_keyword():
    envelope = (await SEOWriterAgent(llm=FakeLLM()).run({})).to_envelope()

    assert envelope == {"success": False, "error": "Keyword is required", "content": None}


# social_manager

def test_parse_social_posts_pads_to_expected_count():
    parsed = parse_social_posts(SOCIAL_RESPONSE, "LinkedIn", 3)
    first, second, third = parsed["posts"]

    assert first.content == "Kick off the week with three quick focus tips for remote teams"
    assert first.hashtags == ["#remote", "#focus"]
    assert first.best_time == "Monday 9 AM"
    assert first.engagement_tip == "Ask followers for their favourite tip"
    assert first.visual_suggestion == "Desk setup photo"
    assert second.content == "Our async stand-up template is free to download"
    assert second.hashtags == ["#async", "#templates"]
    assert third.content == "Sample post 3 about the topic"
    assert third.platform == "LinkedIn"
    assert parsed["strategy"] == "Alternate tips with resources."


async def test_social_manager_generates_posts():
    llm = FakeLLM(SOCIAL_RESPONSE)

    envelope = (await SocialManagerAgent(llm=llm).run({
        "content_topic": "remote work",
        "platform": "LinkedIn",
        "target_audience": "team leads",
        "post_count": 2,
    })).to_envelope()

    assert envelope["success"] is True
    assert len(envelope["posts"]) == 2
    assert envelope["tone"] == "professional"
    assert "Create 2 engaging social media posts for LinkedIn" in llm.prompt


async def test_social_manager_requires_platform():
    envelope = (await SocialManagerAgent(llm=FakeLLM()).run({
        "content_topic": "remote work",
        "target_audience": "team leads",
    })).to_envelope()

    assert envelope["error"] == "Social media platform is required"


@pytest.mark.parametrize("post_count", ["several", -1, 21])
async def test_social_manager_rejects_bad_post_count(post_count):
    llm = FakeLLM(SOCIAL_RESPONSE)

    envelope = (await SocialManagerAgent(llm=llm).run({
        "content_topic": "remote work",
        "platform": "LinkedIn",
        "target_audience": "team leads",
        "post_count": post_count,
    })).to_envelope()

    assert envelope == {
        "success": False,
        "error": "post_count must be a whole number between 1 and 20",
        "posts": None,
    }
    assert llm.calls == []


# sql_teacher

def test_parse_explanation():
    explanation = parse_explanation(SQL_RESPONSE)

    assert explanation.overview == "It lists customers with more than five orders."
    assert explanation.step_by_step == ["FROM customers joins orders", "GROUP BY groups rows per customer"]
    assert explanation.key_concepts == ["HAVING filters groups"]
    assert explanation.performance_notes == ["Index orders.customer_id"]


def test_parse_explanation_defaults():
    explanation = parse_explanation("nonsense")

    assert explanation.overview == DEFAULT_OVERVIEW
    assert explanation.step_by_step == DEFAULT_STEPS


async def test_sql_teacher_uses_level_guidance():
    llm = FakeLLM(SQL_RESPONSE)

    envelope = (await SQLTeacherAgent(llm=llm).run({
        "sql_query": "SELECT 1",
        "skill_level": "expert",
    })).to_envelope()

    assert envelope["success"] is True
    assert envelope["skill_level"] == "expert"
    assert envelope["original_query"] == "SELECT 1"
    assert EXPERT_GUIDANCE in llm.prompt


async def test_sql_teacher_defaults_to_intermediate():
    llm = FakeLLM(SQL_RESPONSE)

    envelope = (await SQLTeacherAgent(llm=llm).run({"sql_query": "SELECT 1"})).to_envelope()

    assert envelope["skill_level"] == "intermediate"
    assert "Assume basic SQL knowledge" in llm.prompt


# ux_audit

def test_parse_ux_audit():
    audit = parse_ux_audit(UX_RESPONSE)

    assert [(issue.severity, issue.description) for issue in audit.accessibility_issues] == [
        ("High", "Images are missing alt text on the product grid"),
        ("Medium", "Low contrast on secondary buttons"),
    ]
    assert audit.accessibility_issues[0].category == "Accessibility"
    assert audit.usability_issues[0].severity == "Critical"
    assert audit.recommendations == ["Add alt text to every product image"]
    assert (audit.accessibility_score, audit.usability_score, audit.overall_score) == (62, 71, 65)


def test_parse_ux_audit_overall_defaults_to_average():
    audit = parse_ux_audit("Accessibility Score: 60/100\nUsability Score: 70/100")

    assert audit.overall_score == 65


def test_describe_target(tmp_path):
    screenshot = tmp_path / "shot.png"
    screenshot.write_bytes(b"png")

    assert describe_target(str(screenshot)) == "UI screenshot analysis for: shot.png"
    assert describe_target("https://shop.test") == "Website URL analysis for: https://shop.test"
    assert describe_target("A login form") == "A login form"


async def test_ux_audit_reports_scores():
    llm = FakeLLM(UX_RESPONSE)

    envelope = (await UXAuditAgent(llm=llm).run({"screenshot_or_url": "https://shop.test"})).to_envelope()

    assert envelope["success"] is True
    assert envelope["audit_type"] == "comprehensive"
    assert envelope["recommendations_count"] == 1
    assert envelope["accessibility_score"] == 62
    assert "Website URL analysis for: https://shop.test" in llm.prompt


async def test_ux_audit_requires_target():
    envelope = (await UXAuditAgent(llm=FakeLLM()).run({})).to_envelope()

    assert envelope["error"] == "Screenshot or URL is required"


# voice_assistant

async def test_voice_assistant_speaks_text_reply():
    synthesizer = FakeSynthesizer()
    agent = VoiceAssistantAgent(llm=FakeLLM("**Sunny** and warm today."), synthesizer=synthesizer)

    envelope = (await agent.run({
        "user_query": "What's the weather?",
        "voice_settings": {"voice": "female", "speed": 1.2},
    })).to_envelope()

    assert envelope["success"] is True
    assert envelope["response"]["text_response"] == "Sunny and warm today."
    assert envelope["response"]["audio"]["voice"] == "nova"
    assert synthesizer.calls == [{"text": "Sunny and warm today.", "voice": "nova", "speed": 1.2}]
    assert envelope["input_type"] == "text"
    assert envelope["response_type"] == "voice"
    assert envelope["transcript"] is None


async def test_voice_assistant_transcribes_audio(tmp_path):
    audio = tmp_path / "question.mp3"
    audio.write_bytes(b"ID3")
    transcriber = FakeTranscriber("What time is it?")
    synthesizer = FakeSynthesizer()
    llm = FakeLLM("It is noon.")
    agent = VoiceAssistantAgent(llm=llm, transcriber=transcriber, synthesizer=synthesizer)

    envelope = (await agent.run({
        "audio_file": str(audio),
        "voice_settings": {"generate_voice": False},
    })).to_envelope()

    assert transcriber.paths == [str(audio)]
    assert "What time is it?" in llm.prompt
    assert envelope["transcript"] == "What time is it?"
    assert envelope["input_type"] == "audio"
    assert envelope["response"]["audio"] is None
    assert envelope["response_type"] == "text"
    assert synthesizer.calls == []


async def test_voice_assistant_rejects_missing_audio_file(tmp_path):
    llm = FakeLLM()
    agent = VoiceAssistantAgent(llm=llm, transcriber=FakeTranscriber(), synthesizer=FakeSynthesizer())

    envelope = (await agent.run({"audio_file": str(tmp_path / "missing.mp3")})).to_envelope()

    assert envelope == {"success": False, "error": "Audio file not found", "response": None}
    assert llm.calls == []


async def test_voice_assistant_requires_input():
    agent = VoiceAssistantAgent(llm=FakeLLM(), transcriber=FakeTranscriber(), synthesizer=FakeSynthesizer())

    envelope = (await agent.run({})).to_envelope()

    assert envelope["error"] == "Either audio file or text query is required"


# workflow_builder

def test_parse_workflow_from_json():
    workflow = parse_workflow(WORKFLOW_JSON, "New lead")

    assert workflow.name == "Lead intake"
    assert [(step.id, step.type) for step in workflow.steps] == [
        ("step_1", "data_operation"),
        ("step_2", "notification"),
    ]
    assert workflow.conditions == ["If lead score > 50"]
    assert workflow.estimated_duration == "10 seconds"


def test_parse_workflow_defaults_when_unstructured():
    workflow = parse_workflow("I cannot help with that.", "New lead")

    assert workflow.name == "Workflow for: New lead"
    assert [step.action for step in workflow.steps] == [
        "Process trigger event",
        "Execute main action",
        "Send completion notification",
    ]
    assert workflow.id == ""


def test_parse_workflow_tolerates_odd_step_values():
    workflow = parse_workflow('{"name": "wf", "steps": [1, null, "Send email", {"action": "Save row", "type": 7}]}', "x")

    assert [(step.id, step.action, step.type) for step in workflow.steps] == [
        ("step_1", "1", "processing"),
        ("step_2", "Send email", "notification"),
        ("step_3", "Save row", "7"),
    ]


async def test_workflow_builder_survives_odd_steps():
    llm = FakeLLM('{"name": "wf", "steps": [1, null, "Send email"]}')

    envelope = (await WorkflowBuilderAgent(llm=llm).run({"trigger": "New lead"})).to_envelope()

    assert envelope["success"] is True
    assert [step["action"] for step in envelope["workflow"]["steps"]] == ["1", "Send email"]


def test_load_definition_accepts_plain_text():
    assert load_definition("Fetch data\nSave results") == {"steps": ["Fetch data", "Save results"]}
    assert load_definition(["a"]) == {"steps": ["a"]}


async def test_workflow_builder_generates_from_trigger():
    llm = FakeLLM(WORKFLOW_JSON)

    envelope = (await WorkflowBuilderAgent(llm=llm).run({"trigger": "New lead"})).to_envelope()

    assert envelope["success"] is True
    assert envelope["operation"] == "generation"
    assert envelope["workflow"]["name"] == "Lead intake"
    assert envelope["workflow"]["id"].startswith("workflow_")
    assert "execution" not in envelope


async def test_workflow_builder_executes_definition_without_llm():
    llm = FakeLLM()
    agent = WorkflowBuilderAgent(llm=llm, executor=FailingExecutor("CRM"))

    envelope = (await agent.run({"workflow_definition": {
        "id": "wf_1",
        "steps": ["Fetch the record", "Call the CRM API", "Notify the owner"],
    }})).to_envelope()

    execution = envelope["execution"]
    assert envelope["operation"] == "execution"
    assert execution["workflow_id"] == "wf_1"
    assert execution["status"] == "failed"
    assert execution["total_steps"] == 3
    assert execution["completed_steps"] == 1
    assert [log["status"] for log in execution["steps"]] == ["completed", "failed"]
    assert llm.calls == []


async def test_workflow_builder_dry_run():
    envelope = (await WorkflowBuilderAgent(llm=FakeLLM()).run({
        "workflow_definition": "Fetch data\nSave results",
    })).to_envelope()

    assert envelope["execution"]["status"] == "completed"
    assert envelope["execution"]["completed_steps"] == 2


async def test_workflow_builder_requires_trigger_or_definition():
    envelope = (await WorkflowBuilderAgent(llm=FakeLLM()).run({})).to_envelope()

    assert envelope == {
        "success": False,
        "error": "Either a trigger or workflow definition is required",
        "workflow": None,
        "execution": None,
    }


# youtube_finder

def test_clean_enhanced_query():
    assert clean_enhanced_query('```\n"linear algebra course"\n```', "x") == "linear algebra course"
    assert clean_enhanced_query("   ", "original") == "original"


def test_filter_videos_drops_shorts_and_sorts():
    videos = [
        make_video("short", "PT30S", 500),
        make_video("b", "PT10M", 100),
        make_video("c", "PT20M", 900),
        make_video("live", "Unknown", 50),
    ]

    assert [video.video_id for video in filter_videos(videos, "viewCount")] == ["c", "b", "live"]
    assert [video.video_id for video in filter_videos(videos, min_views=200)] == ["c"]


async def test_youtube_finder_searches_with_enhanced_query():
    client = FakeYouTubeClient([make_video("a", "PT30S", 500), make_video("b", "PT10M", 100), make_video("c")])
    agent = YouTubeFinderAgent(llm=FakeLLM('"linear algebra full lecture course"'), client=client)

    envelope = (await agent.run({"query": "linear algebra", "sort_by": "viewCount", "limit": 5})).to_envelope()

    assert envelope["success"] is True
    assert client.searches == [{
        "query": "linear algebra full lecture course",
        "limit": 5,
        "order": "viewCount",
        "duration": "any",
    }]
    assert [video["video_id"] for video in envelope["videos"]] == ["b", "c"]
    assert envelope["enhanced_query"] == "linear algebra full lecture course"
    assert envelope["filters"] == {"sort_by": "viewCount", "duration": "any", "min_views": 0}


async def test_youtube_finder_keeps_query_when_enhancement_fails():
    client = FakeYouTubeClient([make_video("a")])
    agent = YouTubeFinderAgent(llm=FakeLLM(LLMError("groq request failed: timeout")), client=client)

    envelope = (await agent.run({"prompt": "calculus"})).to_envelope()

    assert envelope["success"] is True
    assert client.searches[0]["query"] == "calculus"
    assert envelope["enhanced_query"] == "calculus"


async def test_youtube_finder_lists_playlist_without_llm():
    llm = FakeLLM()
    client = FakeYouTubeClient([make_video("a"), make_video("b")])
    agent = YouTubeFinderAgent(llm=llm, client=client)

    envelope = (await agent.run({
        "query_or_playlist_url": "https://www.youtube.com/playlist?list=PL123abc",
    })).to_envelope()

    assert client.playlists == ["PL123abc"]
    assert envelope["playlist_id"] == "PL123abc"
    assert envelope["total_results"] == 2
    assert llm.calls == []


async def test_youtube_finder_reports_service_errors():
    client = FakeYouTubeClient(error=ServiceError("YouTube API key is not configured"))

    envelope = (await YouTubeFinderAgent(llm=FakeLLM(), client=client).run({"query": "x"})).to_envelope()

    assert envelope == {
        "success": False,
        "error": "YouTube search failed: YouTube API key is not configured",
        "videos": None,
    }
