"""Prompt templates for the text-generation backend."""

LANGUAGE_ANALYSIS_PROMPT = """Analyze the following conversation transcript and provide:
1. For each speaker, identify what language(s) they are speaking
2. For each speaker, calculate the percentage of English words vs other languages
3. Overall English speaking percentage across all speakers
4. List any non-English languages detected

Transcript:
{transcript_text}

Provide your response in the following JSON format:
{{
  "speakers": [
    {{
      "speaker": "Speaker-1",
      "languages": ["English", "Spanish"],
      "englishPercentage": 80,
      "details": "brief description"
    }}
  ],
  "overallEnglishPercentage": 75,
  "nonEnglishLanguages": ["Spanish", "French"],
  "summary": "brief summary of language usage"
}}"""

ENGLISH_PERCENT_PROMPT = """You are given a transcript. Count how many words are English words and compute the percent of words that are English.
Return ONLY a JSON object with a single key "percent" whose value is a number (0-100). No extra text.

Transcript:
\"\"\"{transcript_text}\"\"\""""
