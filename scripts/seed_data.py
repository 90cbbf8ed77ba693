#!/usr/bin/env python3
"""
Seed script — creates a realistic dataset for trying out the home timeline.

Creates:
  • 10 users
  • A follow graph (each user follows 4 others)
  • 3 posts per user (30 total), some with media
  • Likes and comments across posts

Run against a running API:
  python scripts/seed_data.py --api-url http://localhost:8000

All IDs are printed so you can use them in curl commands.
"""
import argparse
import random
import time
from typing import Optional

import httpx


BASE_USERS = [
    ("alice_ai", "Alice Chen"),
    ("bob_builder", "Bob Martinez"),
    ("carol_codes", "Carol Singh"),
    ("dave_designs", "Dave Kim"),
    ("eve_engineer", "Eve Johnson"),
    ("frank_feeds", "Frank Williams"),
    ("grace_graphs", "Grace Li"),
    ("henry_hpc", "Henry Brown"),
    ("iris_infra", "Iris Davis"),
    ("jack_ml", "Jack Wilson"),
]

SAMPLE_POSTS = [
    ("Launch day", "Just shipped a new feature to production. Zero downtime deploys are beautiful."),
    ("Weekend hike", "Made it to the summit before sunrise. Worth every step."),
    ("Reading list", "Three books on distributed systems I keep coming back to."),
    ("Coffee", "Tried a new roaster this morning. Fruity, bright, a little too acidic."),
    ("Side project", "Building a tiny recipe app to learn about offline-first sync."),
    ("Conference notes", "Best talk of the day was about graceful degradation in feeds."),
    ("New desk", "Finally set up a standing desk. My back already thanks me."),
    ("Garden update", "The tomatoes are winning. The basil is not."),
    ("Question", "What is everyone using for local development databases these days?"),
    ("Throwback", ""),
    ("Team lunch", "We tried the new ramen place downtown. Strong recommend."),
    ("Milestone", "One year at the new job today. Learned more than I expected."),
]

SAMPLE_COMMENTS = [
    "Love this!",
    "Congrats!",
    "Tell me more",
    "Same here",
    "Great photo",
]


class SeedClient:
    """Thin wrapper over the SocialFold endpoints the seeder touches."""

    def __init__(self, api_url: str, http: Optional[httpx.Client] = None) -> None:
        self.http = http or httpx.Client(base_url=api_url, timeout=10)

    def close(self) -> None:
        self.http.close()

    def _post(self, path: str, payload: dict) -> Optional[dict]:
        resp = self.http.post(path, json=payload)
        if resp.is_error:
            print(f"  HTTP {resp.status_code} on POST {path}: {resp.text}")
            return None
        return resp.json() if resp.content else {}

    def create_user(self, username: str, display_name: str) -> Optional[str]:
        user = self._post("/users/", {"username": username, "display_name": display_name})
        return user["user_id"] if user else None

    def follow(self, follower_id: str, followee_id: str) -> None:
        self._post("/users/follow", {"follower_id": follower_id, "followee_id": followee_id})

    def create_post(self, user_id: str, title: str, content: str, media: Optional[dict] = None) -> Optional[str]:
        payload = {"user_id": user_id, "title": title, "content": content}
        if media:
            payload["media"] = media
        post = self._post("/posts/", payload)
        return post["post_id"] if post else None

    def like(self, post_id: str, user_id: str) -> None:
        self._post(f"/posts/{post_id}/like", {"user_id": user_id})

    def comment(self, post_id: str, user_id: str, content: str) -> None:
        self._post(f"/posts/{post_id}/comments", {"user_id": user_id, "content": content})

    def wait_until_healthy(self, retries: int = 15, delay: float = 3.0) -> None:
        print(f"Waiting for API at {self.http.base_url} ...")
        for _ in range(retries):
            try:
                if self.http.get("/health").json().get("status") == "ok":
                    print("  API is ready!\n")
                    return
            except (httpx.TransportError, ValueError):
                pass
            time.sleep(delay)
        raise RuntimeError(f"API not reachable at {self.http.base_url} after {retries} retries")


def main(api_url: str) -> None:
    client = SeedClient(api_url)
    try:
        client.wait_until_healthy()
        user_ids = seed(client)
    finally:
        client.close()
    print_summary(api_url, user_ids)


def seed(client: SeedClient) -> list[str]:
    """Create users, follows, posts, likes and comments. Returns the user ids."""
    # ── Create users ─────────────────────────────────────────────────────
    print("Creating users...")
    user_ids: list[str] = []
    for username, display_name in BASE_USERS:
        uid = client.create_user(username, display_name)
        if uid:
            user_ids.append(uid)
            print(f"  ✓ {username} ({uid})")
        else:
            print(f"  ✗ Failed to create {username}")

    if not user_ids:
        raise RuntimeError("No users created")

    # ── Create follow graph ───────────────────────────────────────────────
    print("\nCreating follow relationships...")
    for follower_id in user_ids:
        followees = random.sample([u for u in user_ids if u != follower_id], k=min(4, len(user_ids) - 1))
        for followee_id in followees:
            client.follow(follower_id, followee_id)
    print("  ✓ Follow graph created")

    # ── Create posts ──────────────────────────────────────────────────────
    print("\nCreating posts...")
    post_ids: list[str] = []
    pool = SAMPLE_POSTS * 3
    random.shuffle(pool)
    idx = 0
    for user_id in user_ids:
        for _ in range(3):
            title, content = pool[idx % len(pool)]
            idx += 1
            media = None
            if random.random() < 0.3:
                filename = f"seed-{idx}.jpg"
                media = {"filename": filename, "path": f"/uploads/{filename}", "type": "image"}
            pid = client.create_post(user_id, title, content, media)
            if pid:
                post_ids.append(pid)
    print(f"  ✓ {len(post_ids)} posts created")

    # ── Create some likes and comments ────────────────────────────────────
    print("\nAdding likes and comments...")
    likes = comments = 0
    for post_id in post_ids:
        for user_id in random.sample(user_ids, k=random.randint(0, 5)):
            client.like(post_id, user_id)
            likes += 1
        for user_id in random.sample(user_ids, k=random.randint(0, 2)):
            client.comment(post_id, user_id, random.choice(SAMPLE_COMMENTS))
            comments += 1
    print(f"  ✓ {likes} likes, {comments} comments added")
    return user_ids


def print_summary(api_url: str, user_ids: list[str]) -> None:
    print("\n" + "=" * 60)
    print("Seed complete! Here are some commands to try:\n")
    u = user_ids[0]
    print(f"# Get the home timeline for '{BASE_USERS[0][0]}':")
    print(f"  curl -s '{api_url}/feed/?user_id={u}' | python3 -m json.tool\n")
    print(f"# Check notifications:")
    print(f"  curl -s '{api_url}/notifications/?user_id={u}' | python3 -m json.tool\n")
    print(f"# Create a new post:")
    print(f"  curl -s -X POST '{api_url}/posts/' \\")
    print(f"    -H 'Content-Type: application/json' \\")
    print(f"    -d '{{\"user_id\": \"{u}\", \"title\": \"Hi\", \"content\": \"Hello world!\"}}' | python3 -m json.tool\n")
    print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the SocialFold API")
    parser.add_argument("--api-url", default="http://localhost:8000", help="API base URL")
    args = parser.parse_args()
    main(args.api_url)
