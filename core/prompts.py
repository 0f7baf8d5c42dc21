"""Prompt templates for every agent.

Templates use ChatPromptTemplate f-string syntax, so literal braces are
doubled. A definition is either a single human message or a list of
(role, template) pairs.
"""
from typing import Dict, List, Tuple, Union

PromptDefinition = Union[str, List[Tuple[str, str]]]

# Name prefix used when prompts are pulled from LangSmith
LANGSMITH_PREFIX = "agent-catalog-"

TRANSLATOR = """Translate the following text to {target_language}.

{formatting_instruction}

SOURCE LANGUAGE: {source_language}
TARGET LANGUAGE: {target_language}

TEXT TO TRANSLATE:
"{text}"

Please provide:
1. Translated text: the translation in {target_language}
2. Detected language: the source language (if source was 'auto')
3. Confidence: high, medium or low
4. Cultural notes: any cultural context that might affect the translation, as bullet points
5. Alternatives: alternative translations if the text is ambiguous, as bullet points

Ensure the translation is:
- Natural and fluent in {target_language}
- Culturally appropriate
- Faithful to the original meaning and tone

If the source language cannot be determined, assume it's English."""

SQL_GENERATOR = """Generate a SQL query based on the following natural language question and database schema.

DATABASE TYPE: {database_type}
SCHEMA:
{schema}

QUESTION: "{question}"

Please provide:
1. SQL Query: the complete query in a ```sql code block
2. Explanation: a step-by-step explanation of what the query does
3. Optimization Tips: best practices, as bullet points
4. Assumptions: any assumptions made about the data, as bullet points

Make sure the query is:
- Syntactically correct for {database_type}
- Efficient and well-structured
- Uses appropriate JOINs, WHERE clauses, GROUP BY, etc.
- Includes proper aliases and formatting

If the question is ambiguous, provide the most logical interpretation."""

MEET_SCRIBE = """Analyze this meeting transcription and provide:
1. Summary: a short summary (2-3 sentences)
2. Action Items: exactly 5 action items with owners and deadlines (infer if not specified)
3. Decisions: key decisions made
4. Follow-ups: follow-up questions or concerns

Transcription:
{transcript}

Format your response clearly with one heading per section and bullet points for lists. Be specific and actionable."""

PDF_EXTRACTOR = """Extract and structure the following document content into a clean JSON format.

DOCUMENT CONTENT:
{content}

Please analyze the content and create a structured JSON object with the following hierarchy:

1. "metadata": basic document information
   - title (main heading or inferred title)
   - author (if mentioned, otherwise null)
   - date (if mentioned, otherwise null)
   - total_pages (estimate)
   - language

2. "sections": array of main sections with:
   - title: section heading
   - content: full text of the section
   - subsections: array of subsections (if any)
   - page_number: estimated page location

3. "tables": array of extracted tables with:
   - title: table caption or description
   - headers: array of column headers
   - rows: array of data rows
   - page_number: location

4. "key_points": array of important takeaways

5. "entities": named entities found (people, organizations, dates, etc.)

6. "summary": brief overview of the entire document

Return only the JSON inside a ```json code block. If certain sections don't exist, use empty arrays. Focus on accuracy and completeness."""

KB_AGENT = """Answer the following question using only the provided context. If the context doesn't contain enough information to answer the question, say so.

Question: {query}

Context:
{context}

Provide a clear, concise answer and cite specific parts of the context when relevant."""

API_BUILDER = """Generate complete API boilerplate code based on this description.

DESCRIPTION: "{description}"

FRAMEWORK: {framework}
LANGUAGE: {language}
DATABASE: {database}

Please generate a complete API with the following structure:

1. Main Server File ({language} code for the main application)
2. Route Handlers (API endpoints)
3. Models/Schemas (data models for {database})
4. Middleware (authentication, validation, error handling)
5. Configuration (environment variables, database connection)
6. Dependencies (package.json or requirements.txt)
7. Setup Instructions

Put "File: <path>" on its own line before each file, followed by the file in a fenced code block.

The API should include:
- RESTful endpoints (GET, POST, PUT, DELETE)
- Input validation
- Error handling
- Database integration
- API documentation comments

For the {framework} framework:
{framework_guidance}

Include realistic endpoints based on the description, with proper HTTP methods and status codes."""

CODE_DIAGRAM = """Analyze the following code and generate a {diagram_type} diagram in {output_format} format.

CODE:
{code}

DIAGRAM TYPE: {diagram_type}
OUTPUT FORMAT: {output_format}

Please provide:

1. **Diagram Code**: the complete {output_format} syntax for the diagram in a fenced code block
2. **Explanation**: what the diagram represents and key components
3. **Relationships**: how different parts of the code interact, as bullet points
4. **Key Components**: main classes and functions identified, as bullet points
5. **Flow/Structure**: how data or control flows through the system

For {diagram_type} diagrams:
{diagram_guidance}

Ensure the diagram is:
- An accurate representation of the code structure
- Well-organized and readable
- Inclusive of all major components and relationships
- Written in valid {output_format} syntax

If the code is too complex, focus on the main architectural components."""

CODE_FIX = """Analyze this {language} code and provide:
1. Bug detection: list any potential bugs or issues
2. Code quality: suggestions for improvement
3. Best practices: any violations or recommendations
4. Minimal fix: if bugs were found, the corrected version in a fenced code block

Code:
```{language}
{code}
```

Format your response clearly with one heading per section. Be specific and actionable."""

DATA_CLEANER = """Analyze this CSV dataset analysis and create a comprehensive data cleaning plan.

DATASET ANALYSIS:
{analysis}

CLEANING OPTIONS REQUESTED:
{options}

Please provide a detailed cleaning plan that addresses:

1. **Missing Values Strategy**: which columns have missing data, recommended imputation methods, when to drop rows or columns
2. **Duplicate Handling**: how many duplicates were found, the removal strategy, which columns define uniqueness
3. **Data Type Corrections**: inferred vs actual data types, conversion recommendations
4. **Outlier Treatment**: detection methods and treatment strategies (remove, cap, transform)
5. **Format Standardization**: date formats, text case consistency, number formatting
6. **Validation Rules**: range checks, format validation, business rules

Use bullet points under each heading. Provide specific, actionable recommendations and prioritize by impact and ease of implementation."""

EDA_AGENT = """Analyze this dataset and provide 5 actionable insights. Here are the basic statistics:

{statistics}

Strongest correlations between numeric columns:
{correlations}

Dataset preview (first 5 rows):
{preview}

Please provide exactly 5 numbered insights that would be valuable for business decision making. Keep each insight to 1-2 sentences."""

EMAIL_GEN = """Generate an email based on the following request. Make it {tone} in tone.

Purpose: {purpose}

Please provide:
1. Subject: a single subject line
2. Body: the email body (6 sentences maximum), including an appropriate greeting and closing

Start the subject with "Subject:" and put "Body:" on its own line before the email body."""

IMAGE_CAPTION = """Generate {max_captions} high-quality caption(s) for this image description.

IMAGE DESCRIPTION: "{description}"

CAPTION STYLE: {style}
INCLUDE TAGS: {include_tags}

Style guidelines:
- {style_guide}

For each caption, provide:
1. The main caption text, on a line starting with "Caption N:"
2. {hashtag_instruction}
3. Caption length category (short/medium/long)
4. Best use case (social media, blog, etc.)

Ensure captions are original, appropriate for the image content and well written.

Generate exactly {max_captions} caption(s)."""

IMAGE_GEN = """Enhance this image generation prompt to be more detailed and effective: "{prompt}"

Provide:
1. Enhanced Prompt: the improved prompt for AI image generation
2. Negative Prompt: elements the image should avoid
3. Style: recommendations (realistic, artistic, cartoon, etc.)
4. Composition: framing and layout suggestions
5. Colors: palette recommendations
6. Technical: resolution and aspect ratio
{reference_note}"""

MARKET_WATCH = """Analyze this market data for {symbol} and provide trading signals:

Current Price: ${price}
24h Change: {change_percent}%
RSI: {rsi}
SMA 20: {sma_20}
SMA 50: {sma_50}
MACD: {macd}

Provide:
1. Sentiment: current market sentiment (bullish/bearish/neutral)
2. Signals: key signals (buy/sell/hold)
3. Risk: risk assessment (low/medium/high)
4. Support/Resistance: next support and resistance levels
5. Outlook: short-term outlook (1-3 days)

Be specific and actionable. Keep it concise."""

NEWS_SUMMARIZER = [
    (
        "system",
        "You are a senior content analyst. Your summaries surface the points that matter, "
        "connect ideas across the text and end with practical advice.",
    ),
    (
        "human",
        """Summarize and analyze the following content.

CONTENT TO ANALYZE:
{content}

Structure your answer with these headings:

## Executive Summary
2-3 sentences that capture the essence.

## Key Insights
5-7 bullet points.

## Actionable Takeaways
3-5 concrete next steps as bullet points.

## Critical Analysis
2-3 deeper implications.

## Future Perspectives
1-2 forward-looking angles.

## Quantitative Highlights
Key numbers or statistics, if the content has any.

Use clear, professional markdown and keep it scannable.""",
    ),
]

PERSONAL_AGENT = """You are a personal assistant. Analyze this user request and respond:

USER REQUEST: "{query}"

Your capabilities include calendar management, task management, reminders, note-taking,
email drafting, information retrieval and daily planning.

What is already on record for this user:
{context}

Respond in exactly this format:
Action: one of schedule_meeting, create_task, set_reminder, create_note, check_calendar, draft_email, general_assistance
Response: natural language reply to the user
Data:
title: ...
date: YYYY-MM-DD
time: HH:MM
(add any other relevant key: value pairs, one per line)
FollowUp: true or false
Suggestions:
- suggested next action
- another suggestion

If the request is ambiguous, ask a clarifying question in the Response and set FollowUp to true."""

RESEARCH_AGENT = """Conduct comprehensive research on the topic: "{topic}"

Research Parameters:
- Depth: {depth} (brief/comprehensive/detailed)
- Sources to analyze: {sources}

Please provide a structured research report including:

1. **Executive Summary**: 2-3 paragraph overview of key findings
2. **Background & Context**: historical context and current state
3. **Key Findings**: main discoveries and insights (3-5 bullet points)
4. **Detailed Analysis**, with a bold sub-heading and bullet points for each of:
   - **Trends**: current trends and developments
   - **Statistics**: statistics and data points
   - **Perspectives**: expert opinions and perspectives
   - **Challenges**: challenges and opportunities
5. **Sources & References**: primary sources, credible references and data sources as bullet points
6. **Future Outlook**: predictions and emerging developments
7. **Recommendations**: actionable insights as bullet points
8. **Methodology**: how the research was conducted

Keep the report well structured, balanced across perspectives and properly referenced.

For {depth} depth: {depth_guidance}"""

RESUME_OPT = """Optimize this resume for the following job description. Make it ATS-friendly and highly targeted.

JOB DESCRIPTION:
{job_description}

CURRENT RESUME:
{resume}

Please provide, each under its own heading:
1. **Optimized Resume**: the final resume formatted for ATS parsing, inside a ``` fenced block
2. **ATS Suggestions**: bullet points (keep it to 1 page, use standard headings, etc.)
3. **Keyword Analysis**: bullet points on which important keywords were added or improved
4. **Improvements**: bullet points describing the specific improvements made

Focus on incorporating job-specific keywords naturally, quantifying achievements where possible,
using standard section headings and keeping the resume scannable for recruiters."""

SEO_WRITER = """Create an SEO-optimized blog post for the keyword "{keyword}".{secondary_keywords}

Use exactly this layout:

SEO Title: title under 60 characters
Meta Description: description under 160 characters

# H1 heading

## Introduction
Introduction paragraph (100-150 words)

## Section title
3-4 H2 sections like this one, each 200-300 words

## Conclusion
Conclusion paragraph

## Internal Links
- 5 suggested internal links

## External Links
- 3 suggested external links

Make the content comprehensive and engaging. Use the keyword naturally throughout, with relevant sub-keywords and long-tail phrases."""

SOCIAL_MANAGER = """Create {count} engaging social media posts for {platform} about "{topic}" targeted at {audience}.

Platform: {platform}
Topic: {topic}
Audience: {audience}
Tone: {tone}
Number of posts: {count}

Start each post with a line "Post N:" and then give:
Text: the post text (optimized for the platform's character limits and style)
Hashtags: 3-5 relevant hashtags
Best Time: best posting time suggestion
Engagement: what to ask for comments, likes or shares
Visual: visual content suggestion (if applicable)

After the last post, add a line "Overall Strategy:" with 2-3 sentences on how the posts work together.

Platform-specific guidelines:
- Twitter/X: keep under 280 characters, use threads for longer content
- LinkedIn: professional, industry-focused, networking-oriented
- Facebook: community-building, conversational, visual-focused
- Instagram: visual-first, storytelling, emoji-rich
- TikTok: trendy, short-form, viral potential"""

SQL_TEACHER = """Explain this SQL query in detail for a {skill_level} level developer.

SQL QUERY:
{sql_query}

Please provide a comprehensive explanation that includes:

1. **What the query does** (high-level overview)
2. **Step-by-step breakdown** of each clause or component, as bullet points
3. **Key concepts** used (JOINs, subqueries, window functions, etc.), as bullet points
4. **Performance considerations** and potential optimizations, as bullet points
5. **Common use cases** for this type of query, as bullet points
6. **Alternative approaches** if applicable, as bullet points

For {skill_level} level: {level_guidance}

Format the explanation clearly with sections and code examples where helpful."""

UX_AUDIT = """Perform a UX audit on the following interface:

INTERFACE DESCRIPTION:
{description}

AUDIT TYPE: {audit_type}

Cover each category under its own heading, listing one issue per bullet in the form
"- Severity: description (component affected, WCAG reference if applicable, recommended fix)"
where Severity is Critical, High, Medium or Low.

## Accessibility Issues
WCAG 2.1 compliance: color contrast, missing alt text, keyboard navigation, screen reader support, focus indicators.

## Usability Issues
Nielsen's heuristics violations, information architecture, navigation and cognitive load.

## Visual Design Issues
Layout and spacing, typography, visual hierarchy and consistency.

## Technical Issues
Performance, mobile responsiveness, loading states and error handling.

## Priority Recommendations
The top 5 fixes, as bullets.

Finish with these three lines:
Accessibility Score: N/100
Usability Score: N/100
Overall Score: N/100

If no issues are found in a category, say so explicitly."""

VOICE_ASSISTANT = """You are a helpful voice assistant. Respond to this user query in a natural, conversational way.

User Query: "{query}"

Guidelines for your response:
1. Be conversational and friendly
2. Keep responses concise but complete
3. Ask clarifying questions if needed
4. Provide actionable information
5. Use contractions and natural speech patterns

The reply will be read aloud: no markdown, no lists, no emojis."""

WORKFLOW_BUILDER = """Create an automated workflow based on this trigger: "{trigger}"

Design a workflow that includes:
1. Trigger condition
2. Sequence of actions/steps
3. Conditional logic (if any)
4. Error handling
5. Success notifications

Consider common business automation scenarios like email notifications, data processing and API calls.

Return JSON in a ```json fenced block with this shape:
{{
  "name": "short workflow name",
  "steps": [{{"action": "what the step does", "type": "notification|api_call|data_operation|conditional|processing"}}],
  "conditions": ["..."],
  "error_handling": ["..."],
  "notifications": ["..."],
  "estimated_duration": "e.g. 2 minutes"
}}"""

YOUTUBE_FINDER = """Enhance this YouTube search query to find the best educational and lecture videos. Make it more specific for academic content and full lectures, adding terms like "full lecture", "complete course", "tutorial" or "educational video" where they fit, and steering away from shorts, clips, trailers and previews.

Original query: "{query}"

Return only the enhanced search query, no explanation."""

API_DOCS = """Generate comprehensive API documentation for this code file. Create both an OpenAPI/Swagger spec and human-readable documentation.

CODE FILE CONTENT:
{code_file}

Requirements:
1. Analyze the code to identify all API endpoints
2. Extract parameters, request/response formats
3. Generate an OpenAPI 3.0 specification (JSON) in a ```json fenced block
4. Create human-readable markdown documentation
5. Include examples for each endpoint
6. Document authentication requirements
7. Add error response codes

Use these markdown headings for the documentation:
## Summary
## Endpoints
(one bullet per endpoint, formatted as "- METHOD /path - description")
## Authentication
## Error Codes"""

CICD = """Generate a complete GitHub Actions workflow file (.github/workflows/deploy.yml) for this project.

Project Description: "{project_description}"

Requirements:
1. Create a production-ready CI/CD pipeline
2. Include checkout, dependency installation, linting, testing, building, and deployment
3. Use appropriate actions for the technology stack mentioned
4. Add proper environment variables and secrets
5. Include caching for dependencies to speed up builds
6. Add deployment steps if mentioned in the description
7. Include proper error handling and notifications
8. Add comments explaining each step

Output only the YAML content for the workflow file. After the YAML, add a "Required Secrets:" line followed by one bullet per GitHub secret the workflow references."""

CLOUD_COST = """You are a FinOps analyst. Review this cloud billing summary and find ways to reduce spend.

TOTAL SPEND: {total_spend}
BILLING PERIOD ROWS: {row_count}

COST BY SERVICE:
{service_breakdown}

TOP LINE ITEMS:
{top_items}

Format as:
## Findings
- [observations about where money goes, idle or oversized resources, anomalies]
## Recommendations
- [specific, actionable savings steps with CLI commands where useful]
## Estimated Savings
[one line with the estimated monthly saving in dollars and a short justification]"""

COLD_OUTREACH = """Write a personalized cold outreach email based on the company website and your offer.

COMPANY WEBSITE: {company_url}
YOUR OFFER: {offer}

Requirements:
1. Research the company based on the URL (infer their business, challenges, etc.)
2. Write a personalized email that shows you've done your homework
3. Keep it concise but compelling (100-150 words)
4. Include a clear value proposition
5. End with a specific call-to-action
6. Use professional but friendly tone

Format as:
## Subject Line
[Compelling subject line]

## Email Body
[Personalized email content]

## Why This Email Works
[Brief explanation of the personalization strategy]"""

CONTRACT_AUDITOR = """Audit this legal contract for potentially problematic clauses, unfair terms, and areas of concern.

CONTRACT CONTENT:
{contract_content}

Requirements:
1. Identify clauses that are unfavorable to the non-drafting party
2. Flag terms that deviate from industry standards
3. Highlight ambiguous language that could be problematic
4. Note any unusual liability provisions
5. Suggest specific improvements or negotiations
6. Rate the overall fairness of the contract

Format as:
## Contract Audit Summary
### Overall Assessment: [Fair/Concerning/Problematic]

### Flagged Clauses
- **[Clause Name]** ([High/Medium/Low] risk): [the problem and what a standard term would say]

### Missing Protections
- [protections a fair contract would include]

### Positive Aspects
- [fair or standard clauses]

### Recommendations
- [overall advice for handling this contract, most important first]"""

DOCKERIZER = """Generate production-ready Docker configuration for this project.

{context}

Requirements:
1. Create a multi-stage Dockerfile optimized for production
2. Include docker-compose.yml for local development
3. Add .dockerignore file
4. Include proper security practices
5. Optimize for build speed and image size
6. Add health checks and proper CMD/ENTRYPOINT
7. Include environment variables and secrets management
8. Add comments explaining each section

Consider the technology stack and create an appropriate Docker setup. Put each file in its own fenced block under a heading naming the file (## Dockerfile, ## docker-compose.yml, ## .dockerignore), then finish with a "## Notes" section of bullet points."""

FINANCIAL_REPORT = """Analyze this financial report (earnings call, 10-K, etc.) and extract the key information in a simplified format.

DOCUMENT CONTENT:
{pdf_content}

Requirements:
1. Extract key financial metrics and changes
2. Identify major business developments
3. Summarize risk factors and challenges
4. Highlight future outlook and guidance
5. Note any significant announcements
6. Keep the summary concise but comprehensive

Format as:
## Executive Summary
[2-3 sentence overview]

## Key Financial Highlights
- Revenue: [amount and % change]
- Net Income: [amount and % change]
- Other important metrics...

## Business Developments
- [Major announcements, product launches, etc.]

## Risks & Challenges
- [Key risk factors mentioned]

## Future Outlook
[Guidance, projections, strategic plans]"""

LOG_ANOMALY = """Analyze these server logs for anomalies, errors, and potential issues. Provide a detailed root cause analysis.

LOGS:
{log_text}

Analysis Requirements:
1. Identify the main error patterns and anomalies
2. Determine the root cause of issues
3. Provide specific line numbers where issues occur
4. Suggest concrete fixes with code examples
5. Rate the severity of each issue (Critical/High/Medium/Low)
6. Estimate impact on system performance

Format your response as:
## Root Cause Analysis
### Primary Issue: [Brief description]
**Severity:** [Critical/High/Medium/Low]
**Location:** Line X in logs
**Root Cause:** [Detailed explanation]
**Impact:** [System impact description]
**Fix:** [Specific solution with code/commands]

### Secondary Issues:
- [List any additional issues found]

### Recommendations:
- [Additional monitoring/alerting suggestions]"""

README_ARCHITECT = """Generate a professional README.md file for this GitHub repository.

Repository URL: {repo_url}

Requirements:
1. Create a comprehensive README with all standard sections
2. Include badges for build status, license, version, etc.
3. Add proper project description and features
4. Include installation and usage instructions
5. Add API documentation if applicable
6. Include contribution guidelines
7. Add license information
8. Make it visually appealing with proper formatting

Analyze the repository type and tech stack to create appropriate content. Include:
- Project title and description
- Badges and shields
- Table of contents
- Installation steps
- Usage examples
- API reference (if applicable)
- Contributing guidelines
- License
- Contact information

Output only the README markdown."""

REGEX_GENERATOR = """Generate a regular expression for the following requirement. Return the response as a valid JSON object with this exact structure:
{{
  "regex": "the regex pattern without slashes",
  "flags": "g,i,m,s,u,y flags if needed, otherwise empty string",
  "explanation": "detailed explanation of the regex pattern",
  "test_cases": [
    {{
      "test_string": "example string to test",
      "expected_match": true,
      "explanation": "why this should/shouldn't match"
    }}
  ],
  "code_examples": [
    {{
      "language": "JavaScript",
      "code": "const regex = /pattern/flags;\\nconst result = regex.test('test string');",
      "description": "How to use this regex in JavaScript"
    }},
    {{
      "language": "Python",
      "code": "import re\\npattern = r'pattern'\\nresult = re.search(pattern, 'test string')",
      "description": "How to use this regex in Python"
    }}
  ],
  "common_use_cases": ["Use case 1", "Use case 2"],
  "performance_notes": "Any performance considerations or best practices"
}}

Requirement: "{requirement}"

Make sure the regex is optimized and the test cases cover both matching and non-matching scenarios. Include at least 4 test cases. Provide code examples for at least 2 programming languages."""

TERRAFORM = """Generate production-ready Terraform code for this infrastructure requirement.

Requirement: "{infrastructure_description}"

Requirements:
1. Create a complete main.tf file with all necessary resources
2. Use AWS provider (or Azure/GCP based on context)
3. Include proper resource naming and tagging
4. Add security groups, IAM roles, and networking
5. Include variables.tf and terraform.tfvars examples
6. Add outputs.tf for important resource information
7. Include comments explaining each resource
8. Follow Terraform best practices and naming conventions
9. Ensure resources are properly connected and configured

Put each file in its own ```hcl fenced block under a heading naming the file (## main.tf, ## variables.tf, ## outputs.tf), then finish with a "## Notes" section of bullet points."""

TRADING_BACKTESTER = """Backtest this trading strategy using the provided data. Perform a complete simulation and analysis.

STRATEGY LOGIC:
{strategy_logic}

HISTORICAL DATA (CSV format):
{csv_data}

Requirements:
1. Parse the CSV data (assume columns: date, open, high, low, close, volume)
2. Implement the trading strategy logic
3. Simulate trades with realistic transaction costs (0.1% per trade)
4. Calculate comprehensive performance metrics
5. Generate buy/sell signals based on the strategy
6. Provide detailed analysis and recommendations

Output format:
## Strategy Performance Report
### Overview
- Total Return: X%
- Annualized Return: X%
- Max Drawdown: X%
- Win Rate: X%
- Total Trades: X
- Profit Factor: X

### Observations
- [what drove the results, notable trades, market regimes]

### Recommendations
- [strategy improvements and risk management suggestions]"""

N8N_PLAN = """Break down this workflow goal into specific n8n node steps. Identify triggers, actions, and data flow.

Goal: "{goal}"

Rules:
1. Start with a trigger node (schedule, webhook, manual, etc.)
2. Use specific n8n node types from the valid list
3. Show the logical flow: [Trigger] -> [Action1] -> [Action2] -> ...
4. Keep it simple but complete
5. Focus on the main workflow path

Output format:
TRIGGER: [node type] - [description]
STEP 1: [node type] - [description]
STEP 2: [node type] - [description]
..."""

N8N_GENERATE = """Generate a valid n8n workflow JSON for this goal.

GOAL: "{goal}"

WORKFLOW PLAN:
{plan}

VALID NODE TYPES (use ONLY these):
{node_types}

RULES:
1. Use ONLY node types from the valid list above
2. Every node must have a unique "name" (no spaces, use camelCase)
3. The "connections" object must connect ALL nodes in sequence
4. Use "main" as the connection key (not array indices)
5. Include proper parameters for each node type
6. Start with a trigger node
7. Output ONLY valid JSON, no markdown or explanations

JSON Structure:
{{
  "name": "Workflow Name",
  "nodes": [
    {{"name": "triggerNode", "type": "n8n-nodes-base.scheduleTrigger", "parameters": {{}}, "position": [100, 100]}},
    {{"name": "actionNode", "type": "n8n-nodes-base.emailSend", "parameters": {{}}, "position": [300, 100]}}
  ],
  "connections": {{
    "triggerNode": {{"main": [[{{"node": "actionNode", "type": "main", "index": 0}}]]}}
  }}
}}"""

N8N_FIX = """Fix this n8n workflow JSON. The problem is: {error}

GOAL: "{goal}"

WORKFLOW PLAN:
{plan}

CURRENT BROKEN JSON:
{workflow}

VALID NODE TYPES:
{node_types}

Fix the JSON and output ONLY the corrected JSON, no explanations."""

CRYPTO_SENTIMENT = [
    ("system", "You are a crypto market sentiment analyst. You are careful, you say when evidence is thin, and you never give financial advice."),
    ("human", """Assess the current market sentiment for {coin_symbol}.

{market_context}

Respond in exactly this format:
Sentiment Score: [integer from -100 (extremely bearish) to 100 (extremely bullish)]
Label: [Bullish/Bearish/Neutral]

Key Drivers:
- [factor pushing sentiment]

Risks:
- [risk that could reverse the sentiment]

Summary: [2-3 sentences]"""),
]


PROMPTS: Dict[str, PromptDefinition] = {
    "translator": TRANSLATOR,
    "sql_generator": SQL_GENERATOR,
    "meet_scribe": MEET_SCRIBE,
    "pdf_extractor": PDF_EXTRACTOR,
    "kb_agent": KB_AGENT,
    "api_builder": API_BUILDER,
    "code_diagram": CODE_DIAGRAM,
    "code_fix": CODE_FIX,
    "data_cleaner": DATA_CLEANER,
    "eda_agent": EDA_AGENT,
    "email_gen": EMAIL_GEN,
    "image_caption": IMAGE_CAPTION,
    "image_gen": IMAGE_GEN,
    "market_watch": MARKET_WATCH,
    "news_summarizer": NEWS_SUMMARIZER,
    "personal_agent": PERSONAL_AGENT,
    "research_agent": RESEARCH_AGENT,
    "resume_opt": RESUME_OPT,
    "seo_writer": SEO_WRITER,
    "social_manager": SOCIAL_MANAGER,
    "sql_teacher": SQL_TEACHER,
    "ux_audit": UX_AUDIT,
    "voice_assistant": VOICE_ASSISTANT,
    "workflow_builder": WORKFLOW_BUILDER,
    "youtube_finder": YOUTUBE_FINDER,
    "api_docs": API_DOCS,
    "cicd": CICD,
    "cloud_cost": CLOUD_COST,
    "cold_outreach": COLD_OUTREACH,
    "contract_auditor": CONTRACT_AUDITOR,
    "dockerizer": DOCKERIZER,
    "financial_report": FINANCIAL_REPORT,
    "log_anomaly": LOG_ANOMALY,
    "readme_architect": README_ARCHITECT,
    "regex_generator": REGEX_GENERATOR,
    "terraform": TERRAFORM,
    "trading_backtester": TRADING_BACKTESTER,
    "n8n_plan": N8N_PLAN,
    "n8n_generate": N8N_GENERATE,
    "n8n_fix": N8N_FIX,
    "crypto_sentiment": CRYPTO_SENTIMENT,
}
