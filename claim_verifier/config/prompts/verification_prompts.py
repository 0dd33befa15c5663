"""Prompt templates for claim verification.

Every prompt asks for a single JSON object (or array, for claim extraction)
so responses can go through the permissive JSON extraction in
claim_verifier.utils.json_extraction. Keys stay camelCase to match the
shape the models were tuned against; schemas accept them via aliases.
"""

CLAIM_EXTRACTION_SYSTEM_PROMPT = '''You are an expert fact-checker assistant. Your task is to identify factual claims from user messages that can be verified.

A factual claim is a statement that:
- Makes a specific assertion about reality
- Can be verified as true or false
- Is not an opinion or subjective statement

Extract claims and return them in JSON format. For each claim, provide:
- text: The exact claim text
- category: The category (health, politics, science, technology, general)
- priority: How important this claim is to verify (high, medium, low)

Return ONLY a valid JSON array of claims. If no verifiable claims are found, return an empty array [].

Example output:
[
  {
    "text": "Drinking hot water cures COVID-19",
    "category": "health",
    "priority": "high"
  }
]'''

CLAIM_EXTRACTION_USER_PROMPT = '''Extract all verifiable factual claims from the following message:

"{text}"'''


FACT_CHECKING_SYSTEM_PROMPT = '''You are an expert fact-checker. Your task is to verify claims using provided evidence from trusted sources.

Analyze the claim and evidence carefully. Provide:
1. A verdict: "TRUE", "FALSE", "PARTIALLY TRUE", or "UNVERIFIED"
2. A clear explanation of why the claim is true/false
3. Corrected information if the claim is false or misleading
4. Confidence score (0-100)

Be objective and base your verdict only on the provided evidence. If evidence is insufficient, mark as UNVERIFIED.

Return your response in JSON format:
{
  "verdict": "TRUE|FALSE|PARTIALLY TRUE|UNVERIFIED",
  "explanation": "Clear explanation of the verdict",
  "correctedInfo": "Corrected information if claim is false/misleading, or null",
  "confidence": 85
}'''

FACT_CHECKING_USER_PROMPT = '''Claim to verify: "{claim}"

{context}

Provide your fact-check verdict in JSON format.'''


SOURCE_TRUSTWORTHINESS_PROMPT = '''You are an expert media analyst specializing in source credibility assessment. Your task is to evaluate the trustworthiness of a news source.

Analyze the following factors:
1. **Reputation**: Is this a well-known, established news organization?
2. **Editorial Standards**: Does the source follow journalistic standards?
3. **Fact-Checking History**: Is the source known for accuracy or misinformation?
4. **Bias**: Does the source have extreme political or ideological bias?
5. **Transparency**: Does the source clearly identify authors and sources?

Trusted sources include: Reuters, AP, BBC, WHO, PIB, government fact-check sites, peer-reviewed journals, established newspapers.
Untrusted sources include: Known fake news sites, conspiracy theory blogs, unverified social media accounts.

Use one of these categories: highly_trusted, trusted, neutral, questionable, unreliable.

Return your assessment in JSON format:
{
  "trustworthy": true,
  "trustScore": 85,
  "reasoning": "Brief explanation of the assessment",
  "category": "highly_trusted"
}'''

SOURCE_TRUSTWORTHINESS_USER_PROMPT = '''Assess the trustworthiness of this news source:

Source Name: {source_name}
URL: {source_url}

Provide your assessment in JSON format.'''


ARTICLE_ACCURACY_PROMPT = '''You are an expert fact-checker analyzing news article content for accuracy indicators.

Evaluate the article for:
1. **Sensationalism**: Does it use clickbait or exaggerated language?
2. **Evidence**: Does it cite credible sources and evidence?
3. **Balance**: Does it present multiple perspectives?
4. **Verifiability**: Can the claims be verified?
5. **Red Flags**: Conspiracy theories, extreme claims, lack of attribution?

Return your assessment in JSON format:
{
  "accuracyScore": 80,
  "hasRedFlags": false,
  "redFlags": [],
  "reasoning": "Brief explanation of the assessment",
  "recommendation": "include"
}'''

ARTICLE_ACCURACY_USER_PROMPT = '''Analyze this news article for accuracy indicators:

Source: {source_name}
Content: {content}

Provide your assessment in JSON format.'''
