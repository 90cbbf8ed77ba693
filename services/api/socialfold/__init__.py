"""SocialFold social network API."""
