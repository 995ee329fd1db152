from openai import AsyncOpenAI
from typing import Optional
from voice_relay.core.settings import CompletionSettings, OpenAISettings


class LLMClient:
    def __init__(
        self,
        settings: Optional[OpenAISettings] = None,
        completion_settings: Optional[CompletionSettings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        if completion_settings is None:
            completion_settings = CompletionSettings()
        self.model = completion_settings.gpt_model
        self.max_tokens = completion_settings.max_tokens
        self.temperature = completion_settings.completion_temperature

        self.owns_client = client is None
        if client is None:
            if settings is None:
                settings = OpenAISettings()
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=completion_settings.completion_timeout_ms / 1000,
                max_retries=0,
            )
        self.client = client

    async def close(self) -> None:
        if self.owns_client:
            await self.client.close()

    async def complete(self, text: str) -> str:
        """
        Generate a reply to a user message.

        Args:
            text: The message text, or the transcription of a voice note

        Returns:
            str: The model's reply
        """
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": text
                }
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        # Check for refusal
        if completion.choices[0].message.refusal:
            raise ValueError(f"LLM refused request: {completion.choices[0].message.refusal}")

        return completion.choices[0].message.content or ""
