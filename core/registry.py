"""Slug -> agent class lookup.

Agent modules are imported on first use so that listing or running one agent
does not pull in every provider SDK and service the catalog knows about.
"""
import importlib
import logging
from typing import Any, Dict, List, Optional, Type

from agents.base import BaseAgent
from core.exceptions import AgentNotFoundError
from core.models import AgentInfo

logger = logging.getLogger(__name__)

AGENTS: Dict[str, str] = {
    "api_builder": "agents.api_builder:APIBuilderAgent",
    "api_docs_agent": "agents.api_docs_agent:APIDocsAgent",
    "cicd_agent": "agents.cicd_agent:CICDAgent",
    "cloud_cost_agent": "agents.cloud_cost_agent:CloudCostAgent",
    "code_diagram": "agents.code_diagram:CodeDiagramAgent",
    "code_fix_agent": "agents.code_fix_agent:CodeFixAgent",
    "cold_outreach_agent": "agents.cold_outreach_agent:ColdOutreachAgent",
    "contract_auditor": "agents.contract_auditor:ContractAuditorAgent",
    "crypto_sentiment_agent": "agents.crypto_sentiment_agent:CryptoSentimentAgent",
    "data_cleaner": "agents.data_cleaner:DataCleanerAgent",
    "dockerizer_agent": "agents.dockerizer_agent:DockerizerAgent",
    "eda_agent": "agents.eda_agent:EDAAgent",
    "email_gen": "agents.email_gen:EmailGenAgent",
    "financial_report_agent": "agents.financial_report_agent:FinancialReportAgent",
    "image_caption": "agents.image_caption:ImageCaptionAgent",
    "image_gen_agent": "agents.image_gen_agent:ImageGenAgent",
    "kb_agent": "agents.kb_agent:KnowledgeBaseAgent",
    "log_anomaly_agent": "agents.log_anomaly_agent:LogAnomalyAgent",
    "market_watch": "agents.market_watch:MarketWatchAgent",
    "meet_scribe": "agents.meet_scribe:MeetingScribeAgent",
    "n8n_architect": "agents.n8n_architect:N8NArchitectAgent",
    "news_summarizer": "agents.news_summarizer:NewsSummarizerAgent",
    "pdf_extractor": "agents.pdf_extractor:PDFExtractorAgent",
    "personal_agent": "agents.personal_agent:PersonalAgent",
    "readme_architect": "agents.readme_architect:ReadmeArchitectAgent",
    "regex_generator": "agents.regex_generator:RegexGeneratorAgent",
    "research_agent": "agents.research_agent:ResearchAgent",
    "resume_opt": "agents.resume_opt:ResumeOptAgent",
    "seo_writer": "agents.seo_writer:SEOWriterAgent",
    "social_manager": "agents.social_manager:SocialManagerAgent",
    "sql_generator": "agents.sql_generator:SQLGeneratorAgent",
    "sql_teacher": "agents.sql_teacher:SQLTeacherAgent",
    "terraform_agent": "agents.terraform_agent:TerraformAgent",
    "trading_backtester": "agents.trading_backtester:TradingBacktesterAgent",
    "translator": "agents.translator:TranslatorAgent",
    "ux_audit": "agents.ux_audit:UXAuditAgent",
    "voice_assistant": "agents.voice_assistant:VoiceAssistantAgent",
    "workflow_builder": "agents.workflow_builder:WorkflowBuilderAgent",
    "youtube_finder": "agents.youtube_finder:YouTubeFinderAgent",
}

_instances: Dict[str, BaseAgent] = {}


def get_agent_class(slug: str) -> Type[BaseAgent]:
    target = AGENTS.get(slug)
    if target is None:
        raise AgentNotFoundError(f"Agent not found: {slug}")
    module_name, class_name = target.split(":")
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def get_agent(slug: str) -> BaseAgent:
    """Process-wide agent instance for `slug`, built on first request."""
    if slug not in _instances:
        logger.debug("Loading agent %s", slug)
        _instances[slug] = get_agent_class(slug)()
    return _instances[slug]


def list_agents() -> List[AgentInfo]:
    return [get_agent_class(slug).info() for slug in sorted(AGENTS)]


async def run_agent(slug: str, input_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Run an agent and return its flattened `{success, error?, ...}` envelope."""
    result = await get_agent(slug).run(input_data or {})
    return result.to_envelope()


def reset():
    """Drop cached agent instances."""
    _instances.clear()
