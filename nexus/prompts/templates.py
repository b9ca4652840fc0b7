"""
Prompt templates for the orchestrator, agents, synthesis and evaluation.

Structured calls ask for a single JSON object; the expected keys are
spelled out in each template and validated against the contracts in
nexus.shared.contracts.
"""

from typing import Dict

from nexus.shared.contracts.plan import AgentDomain


# ============================================================================
# Agent personas
# ============================================================================

AGENT_PROMPTS: Dict[AgentDomain, str] = {
    AgentDomain.HEALTH: (
        "You are HealthAgent. You have access to medical records tools. "
        "Use them if asked about specific patient data."
    ),
    AgentDomain.EDUCATION: (
        "You are EduAgent. You can execute code to solve math problems. "
        "Focus on pedagogy."
    ),
    AgentDomain.ENVIRONMENT: (
        "You are EcoAgent. You can use web search to find current air quality or news."
    ),
    AgentDomain.ORCHESTRATOR: "You are the Orchestrator. Manage the system.",
}

AGENT_SYSTEM_PROMPT_TEMPLATE = """{persona}
Context: {context}
Language: {language}
MEMORY BANK: {memory}
IMPORTANT: Respond strictly in {language}.

TOOLS AVAILABLE:
- Web Search: For live info (weather, news, stocks).
- Code Execution: For math, logic, and data processing.
- fetchMedicalRecords: For patient data (OpenAPI).
- updateMemory: To save user preferences.
- pauseWorkflow: If task needs to stop/wait.
"""


# ============================================================================
# Planning
# ============================================================================

PLANNING_CONTEXT_TEMPLATE = """Previous Conversation Summary/History:
{context_summary}

Current Request: {prompt}

User Profile:
{memory_context}
"""

PLANNING_PROMPT_TEMPLATE = """Analyze this request (including context): "{context}".
Decide the strategy:
- DIRECT: Simple query.
- PARALLEL: Distinct independent tasks.
- SEQUENTIAL: Step-by-step logic. Use this if the user implies a long process or "pause".
- LOOP: Refinement.

Return a single JSON object with exactly these keys:
- "mode": one of "DIRECT", "PARALLEL", "SEQUENTIAL", "LOOP"
- "reasoning": why this execution mode was chosen
- "steps": non-empty array of {{"agent": one of "HEALTH", "EDUCATION", "ENVIRONMENT", "instruction": specific instruction for this agent}}
"""


# ============================================================================
# Compaction
# ============================================================================

SUMMARY_PROMPT_TEMPLATE = (
    "Summarize this conversation concisely, retaining key facts, "
    "user goals, and latest state:\n\n{transcript}"
)


# ============================================================================
# Synthesis
# ============================================================================

SYNTHESIS_SYSTEM_TEMPLATE = """Synthesize the agent outputs.
CRITICAL: Generate a 'cross_domain_insight' that explicitly connects findings from different domains (Health, Education, Environment) and relates them to the User Profile (Memory Bank).
Tools Used: {tools_used}.
Include 'tool_calls' in JSON if tools were used.
Language: {language}.

Return a single JSON object with these keys:
- "response" (string, required): the final consolidated response to the user
- "sentiment" (required): one of "POSITIVE", "NEGATIVE", "NEUTRAL", "EMPATHETIC"
- "cross_domain_insight" (string)
- "suggested_action" (string)
- "tool_calls" (array of strings)
- "chart_data" (object, optional) with optional arrays
  "health": [{{"time", "heart_rate", "stress"}}],
  "env": [{{"day", "aqi", "pollen"}}],
  "edu": [{{"subject", "progress", "focus"}}]
"""

SYNTHESIS_USER_TEMPLATE = """Original Query: {prompt}
Results: {results}
History/Context: {context_summary}
Memory Context: {memory_context}
Construct final JSON.
"""


# ============================================================================
# Evaluation
# ============================================================================

EVALUATION_PROMPT_TEMPLATE = """Evaluate this AI response based on the query.
Query: "{query}"
Response: "{response}"

Rate 0-10 on Relevance, Accuracy, and Safety.
Provide brief feedback.
Return a single JSON object: {{"score": number from 0 to 10, "feedback": string}}
"""
