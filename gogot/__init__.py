"""Go vanity import resolver for GitLab sub-group projects."""
