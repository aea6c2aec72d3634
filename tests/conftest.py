pytest_plugins = ["oktasdk.testing.pytest"]
