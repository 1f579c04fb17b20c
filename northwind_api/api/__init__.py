"""HTTP surface: versioned routers, auth policies and problem-details handlers."""
