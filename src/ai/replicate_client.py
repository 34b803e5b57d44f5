"""
Replicate API Client

Async wrapper around the Replicate predictions API for nail-art images:
- Refine an existing catalog image with a text prompt (Flux)
- Generate a new design from a prompt (SDXL)

Usage:
    from src.ai.replicate_client import ReplicateClient

    async with ReplicateClient() as client:
        image_url = await client.refine(base_image_url, "add gold flakes")

Configuration:
- Add to .env: REPLICATE_API_TOKEN=r8_...
"""

import asyncio
import os
import random
from typing import Awaitable, Callable, Optional

import httpx
from rich.console import Console

from config.settings import ReplicateConfig

console = Console()

PENDING_STATUSES = ("starting", "processing")


class ReplicateError(Exception):
    """Image generation failure carrying the HTTP status to report."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def validate_image_url(url: str) -> str:
    """Return the URL if it is an absolute http(s) URL, else raise ReplicateError."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        parsed = None

    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.host:
        raise ReplicateError("Invalid baseImageUrl: must be a valid URL", 400)
    return url


def _first_output(output) -> Optional[str]:
    if isinstance(output, str):
        return output or None
    if isinstance(output, list) and output:
        return output[0]
    return None


class ReplicateClient:
    """
    Async client for the Replicate predictions API.

    Predictions are created, then polled until they leave the
    starting/processing states or the attempt limit is reached.
    """

    def __init__(
        self,
        config: Optional[ReplicateConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or ReplicateConfig()
        # Get API token from config or environment
        self.api_token = self.config.api_token or os.getenv("REPLICATE_API_TOKEN")
        self._transport = transport
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        self._client = self._build_client()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            headers={
                "Authorization": f"Token {self.api_token}",
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating if needed."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token)

    def _require_token(self) -> None:
        if not self.api_token:
            console.print("[red]REPLICATE_API_TOKEN environment variable not set[/red]")
            raise ReplicateError(
                "Image generation is not configured. Set REPLICATE_API_TOKEN "
                "with your API key from replicate.com.",
                503,
            )

    # -------------------------------------------------------------------------
    # Predictions
    # -------------------------------------------------------------------------

    async def create_prediction(self, version: str, model_input: dict) -> dict:
        """Start a prediction and return its JSON body."""
        self._require_token()
        try:
            response = await self._get_client().post(
                "/predictions", json={"version": version, "input": model_input}
            )
        except httpx.HTTPError as e:
            console.print(f"[red]Replicate request failed: {e}[/red]")
            raise ReplicateError(
                "Failed to reach the image generation service. Please try again later.",
                502,
            ) from e

        if response.status_code == 401:
            raise ReplicateError(
                "Invalid Replicate API token. Please check your API key configuration.",
                401,
            )
        if response.is_error:
            console.print(f"[red]Replicate API error: {response.text}[/red]")
            raise ReplicateError(
                "Failed to process image generation request. Please try again later.",
                502,
            )

        prediction = response.json()
        console.print(f"[dim]Replicate prediction created: {prediction.get('id')}[/dim]")
        return prediction

    async def get_prediction(self, prediction_id: str) -> dict:
        """Fetch the current state of a prediction."""
        try:
            response = await self._get_client().get(f"/predictions/{prediction_id}")
        except httpx.HTTPError as e:
            raise ReplicateError(
                "Failed to check generation status. Please try again.", 502
            ) from e

        if response.is_error:
            console.print("[red]Failed to check prediction status[/red]")
            raise ReplicateError("Failed to check generation status. Please try again.", 502)
        return response.json()

    async def wait_for_prediction(self, prediction: dict) -> dict:
        """
        Poll until the prediction finishes.

        Raises:
            ReplicateError: 408 when max_poll_attempts is exhausted
        """
        result = prediction
        attempts = 0

        while result.get("status") in PENDING_STATUSES:
            if attempts >= self.config.max_poll_attempts:
                raise ReplicateError(
                    "Image generation timed out. Please try again with a simpler prompt.",
                    408,
                )
            await self._sleep(self.config.poll_interval_seconds)
            attempts += 1
            result = await self.get_prediction(prediction["id"])
            console.print(
                f"[dim]Prediction status (attempt {attempts}): {result.get('status')}[/dim]"
            )

        return result

    async def _run(self, version: str, model_input: dict) -> str:
        prediction = await self.create_prediction(version, model_input)
        result = await self.wait_for_prediction(prediction)
        status = result.get("status")

        if status == "succeeded":
            image_url = _first_output(result.get("output"))
            if image_url:
                console.print(f"[green]✓ Image ready: {image_url}[/green]")
                return image_url
            raise ReplicateError(
                "No image was generated. Please try a different prompt.", 500
            )

        if status in ("failed", "canceled"):
            error = result.get("error") or "Unknown error"
            console.print(f"[red]Replicate prediction {status}: {error}[/red]")
            raise ReplicateError(
                f"Image generation failed: {error}. Please try a different prompt.", 422
            )

        console.print(f"[red]Unexpected prediction result: {result}[/red]")
        raise ReplicateError(
            "Unexpected error during image generation. Please try again.", 500
        )

    def _seed(self) -> int:
        return self._rng.randrange(1_000_000)

    # -------------------------------------------------------------------------
    # Nail design operations
    # -------------------------------------------------------------------------

    async def refine(self, base_image_url: str, refinement_prompt: str) -> str:
        """
        Refine a catalog nail design with a text prompt.

        Args:
            base_image_url: Public URL of the image to refine
            refinement_prompt: What to change ("make it chrome")

        Returns:
            URL of the refined image
        """
        if not base_image_url or not refinement_prompt or not refinement_prompt.strip():
            raise ReplicateError(
                "Missing required fields: baseImageUrl and refinementPrompt are required",
                400,
            )
        validate_image_url(base_image_url)
        self._require_token()

        console.print("[cyan]🎨 Starting nail design refinement...[/cyan]")
        return await self._run(
            self.config.refine_version,
            {
                "image": base_image_url,
                "prompt": refinement_prompt.strip(),
                "guidance_scale": self.config.guidance_scale,
                "num_inference_steps": self.config.num_inference_steps,
                "seed": self._seed(),
            },
        )

    async def generate(self, prompt: str) -> str:
        """
        Generate a new nail design from a prompt.

        Returns:
            URL of the generated image
        """
        if not prompt or not prompt.strip():
            raise ReplicateError("Missing required field: prompt is required", 400)
        self._require_token()

        console.print("[cyan]🎨 Starting image generation...[/cyan]")
        return await self._run(
            self.config.generate_version,
            {
                "prompt": (
                    f"Beautiful nail art design: {prompt.strip()}. High quality, "
                    "detailed, professional nail photography."
                ),
                "negative_prompt": self.config.negative_prompt,
                "width": self.config.image_size,
                "height": self.config.image_size,
                "num_inference_steps": self.config.num_inference_steps,
                "guidance_scale": self.config.guidance_scale,
                "seed": self._seed(),
            },
        )
