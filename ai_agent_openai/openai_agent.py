import html
import logging

import bleach
import requests

from .agent import NO_SUMMARY, SummaryAgent, SummaryError

logger = logging.getLogger(__name__)


class OpenAISummaryAgent(SummaryAgent):
    """
    Summarizes real people from search result links using an OpenAI
    compatible chat completion endpoint
    """

    system_prompt = "You are a helpful assistant that summarizes real people based on source links."

    def __init__(self, api_key, api_url="https://api.openai.com/v1/chat/completions",
                 model="gpt-3.5-turbo", summary_words=200, temperature=0.7,
                 timeout=30.0, session=None):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.summary_words = summary_words
        self.temperature = temperature
        self.timeout = timeout
        self.session = session or requests.Session()

    def summarize(self, topic, links):
        prompt = self._build_prompt(topic, links)
        content = self._call_completion_api(prompt)
        # the UI shows the summary as text, drop any markup the model produced
        content = html.unescape(bleach.clean(content or "", tags=[], strip=True)).strip()
        return content or NO_SUMMARY

    def _build_prompt(self, topic, links):
        sources = "\n".join(links)
        return f"""
The user searched for "{topic}". This name may refer to one or more real people or a recognizable character.

1. If it's **not a real person or recognizable character**, respond only: "Not a real person."
2. If it's **a common name with multiple people**, pick **only one** notable person to write about, based on:
   - Relevance (e.g. most known in search results),
   - Country of origin or association,
   - Profession and uniqueness.

Write a single summary of about {self.summary_words} words about **that one person**, using only these links as sources:

{sources}

Avoid repeating that many people share the same name. Instead, focus on summarizing the **most relevant individual** clearly.
"""

    def _call_completion_api(self, prompt):
        """
        Call the chat completion endpoint and return the first choice's text.

        Raises SummaryError on transport, HTTP or API errors. A response
        without usable content returns an empty string.
        """
        if not self.api_key:
            raise SummaryError("OPENAI_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
        }

        try:
            response = self.session.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SummaryError(f"Connection error to completion API: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = None

        if isinstance(result, dict) and result.get("error"):
            error = result["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise SummaryError(f"Completion API error: {message}")

        if response.status_code != 200:
            raise SummaryError(f"Completion API error: HTTP {response.status_code}")

        try:
            return result["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning("Completion API response had no message content")
            return ""
