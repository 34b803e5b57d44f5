#!/usr/bin/env python3
"""
Web API and preview page for matching prompts to nail designs.

Supports two catalog sources:
  - Supabase database (default): reads the `vibe_ideas` table
  - Local JSON export: use --catalog-file path/to/vibe_ideas.json

Usage:
    python viewer.py                                # Supabase catalog
    python viewer.py --catalog-file vibes.json      # Local catalog

Endpoints:
    POST /api/match      {"prompt": "..."}
    POST /api/refine     {"baseImageUrl": "...", "refinementPrompt": "..."}
    POST /api/generate   {"prompt": "..."}
    GET  /api/vibes      ?limit=5
    GET  /api/health

Then open http://localhost:5001 in your browser.
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional

from flask import Flask, jsonify, render_template_string, request
from flask_cors import CORS

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import AppConfig, config
from src.ai.replicate_client import ReplicateClient, ReplicateError
from src.vibes.service import VibeService

HTML_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Nail Vibe Matcher</title>
  <style>
    body { font-family: -apple-system, sans-serif; max-width: 640px; margin: 40px auto; }
    input { width: 75%; padding: 8px; }
    img { max-width: 100%; border-radius: 12px; margin-top: 16px; }
    .tags { color: #888; font-size: 0.9em; }
  </style>
</head>
<body>
  <h1>💅 Nail Vibe Matcher</h1>
  <form id="match-form">
    <input id="prompt" placeholder="Harry Potter cutesy, Barbie glam metallic..." autofocus>
    <button type="submit">Match</button>
  </form>
  <div id="result"></div>
  <script>
    document.getElementById("match-form").addEventListener("submit", async (e) => {
      e.preventDefault();
      const prompt = document.getElementById("prompt").value;
      const res = await fetch("/api/match", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify({prompt}),
      });
      const body = await res.json();
      const out = document.getElementById("result");
      out.replaceChildren();
      if (!body.success) {
        out.append(el("p", body.error));
        return;
      }
      const d = body.data;
      const img = document.createElement("img");
      img.src = d.entry.image_url;
      img.alt = d.title;
      out.append(
        el("h2", d.title),
        el("p", `${d.match_type} · ${body.extracted_tags.join(", ")}`, "tags"),
        img,
      );
    });

    function el(tag, text, className) {
      const node = document.createElement(tag);
      node.textContent = text;
      if (className) node.className = className;
      return node;
    }
  </script>
</body>
</html>
"""


def _run_async(coro):
    return asyncio.run(coro)


def create_app(
    service: VibeService,
    replicate_factory: Optional[Callable[[], ReplicateClient]] = None,
    app_config: Optional[AppConfig] = None,
) -> Flask:
    """
    Build the Flask app.

    Args:
        service: VibeService used for /api/match and /api/vibes
        replicate_factory: Builds a fresh ReplicateClient per request
        app_config: Settings (defaults to config.settings.config)
    """
    app_config = app_config or config
    if replicate_factory is None:

        def replicate_factory():
            return ReplicateClient(app_config.replicate)

    app = Flask(__name__)
    CORS(app)

    async def _with_client(operation):
        async with replicate_factory() as client:
            return await operation(client)

    @app.route("/")
    def index():
        """Serve the preview page."""
        return render_template_string(HTML_TEMPLATE)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/match", methods=["POST"])
    def match():
        """Match a prompt to the best catalog design."""
        body = request.get_json(silent=True) or {}
        prompt = body.get("prompt")
        if not isinstance(prompt, str):
            return jsonify({"success": False, "error": "Missing required field: prompt"}), 400

        return jsonify(service.find_best_match(prompt))

    @app.route("/api/vibes")
    def vibes():
        """Return a few catalog designs for previews."""
        limit = request.args.get("limit", default=5, type=int)
        limit = max(1, min(limit, 50))
        return jsonify([entry.to_dict() for entry in service.get_random_vibes(limit)])

    @app.route("/api/refine", methods=["POST"])
    def refine():
        """Refine a matched design via Replicate."""
        body = request.get_json(silent=True) or {}
        base_image_url = body.get("baseImageUrl")
        refinement_prompt = body.get("refinementPrompt")

        if not base_image_url or not refinement_prompt:
            return (
                jsonify(
                    {
                        "error": "Missing required fields: baseImageUrl and "
                        "refinementPrompt are required"
                    }
                ),
                400,
            )

        try:
            image_url = _run_async(
                _with_client(lambda c: c.refine(base_image_url, refinement_prompt))
            )
        except ReplicateError as e:
            return jsonify({"error": e.message}), e.status_code

        return jsonify({"imageUrl": image_url})

    @app.route("/api/generate", methods=["POST"])
    def generate():
        """Generate a new design via Replicate."""
        body = request.get_json(silent=True) or {}
        prompt = body.get("prompt")
        if not prompt:
            return jsonify({"error": "Missing required field: prompt is required"}), 400

        try:
            image_url = _run_async(_with_client(lambda c: c.generate(prompt)))
        except ReplicateError as e:
            return jsonify({"error": e.message}), e.status_code

        return jsonify({"image": {"url": image_url}})

    return app


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Nail vibe matcher web API")
    parser.add_argument(
        "--catalog-file",
        type=str,
        default=None,
        help="Load the catalog from a JSON export instead of Supabase",
    )
    parser.add_argument("--port", type=int, default=config.server.port)
    parser.add_argument("--host", type=str, default=config.server.host)
    parser.add_argument("--debug", action="store_true", default=config.server.debug)
    return parser.parse_args()


if __name__ == "__main__":
    from main import build_service

    args = parse_args()

    # ANSI color codes for terminal styling
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"
    GREEN = "\033[32m"
    CYAN = "\033[36m"
    RED = "\033[31m"
    UNDERLINE = "\033[4m"

    print()
    print(f"{BOLD}╔══════════════════════════════════════════════════════╗{RESET}")
    print(f"{BOLD}║              💅  NAIL VIBE MATCHER  💅               ║{RESET}")
    print(f"{BOLD}╚══════════════════════════════════════════════════════╝{RESET}")

    source = args.catalog_file or "Supabase Database"
    print(f"\n{DIM}Catalog:{RESET} {source}")
    try:
        vibe_service = build_service(catalog_file=args.catalog_file)
        print(f"{GREEN}✓ Connected{RESET}")
    except (ValueError, OSError) as e:
        print(f"{RED}✗ Catalog unavailable: {e}{RESET}")
        sys.exit(1)

    print()
    print(
        f"{BOLD}   🌐  {UNDERLINE}{CYAN}http://{args.host}:{args.port}{RESET}"
    )
    print(f"{DIM}Press CTRL+C to stop the server{RESET}")
    print()

    create_app(vibe_service).run(host=args.host, port=args.port, debug=args.debug)
