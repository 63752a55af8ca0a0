"""Login through the application's login form."""

from __future__ import annotations

from walnut.context.web import WebContext


async def login(ctx: WebContext) -> None:
    """@walnut_method
    name: Login to Application
    description: Login with username and password using test data
    actionType: custom_login
    context: web
    needsLocator: false
    category: Authentication
    """
    await ctx.navigate(ctx.test_base_url + "/login")
    await ctx.type('[data-testid="username"]', ctx.params["username"])
    await ctx.type('[data-testid="password"]', ctx.params["password"])
    await ctx.click('[data-testid="submit"]')
    await ctx.verify_text_visible("Dashboard")
