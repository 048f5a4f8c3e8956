from fastapi import Depends, HTTPException, Request, status

from contentguard.core.services.redis_service import RedisService, get_redis_service


class UserRateLimiter:
    """
    Per-user rate limiter for authenticated endpoints.

    Uses the user id the auth dependency stores on ``request.state`` and falls back
    to the client IP when none is present.

    Usage:
        @router.post(
            "/submit",
            dependencies=[Depends(UserRateLimiter(times=5, seconds=60))],
        )
    """

    def __init__(self, times: int, seconds: int):
        self.times: int = times
        self.seconds: int = seconds

    async def __call__(self, request: Request, redis: RedisService = Depends(get_redis_service)):
        user_id: str | None = getattr(request.state, "user_id", None)

        if user_id:
            key = f"rate_limit:user:{user_id}:{request.url.path}"
        else:
            client_ip = request.client.host if request.client else "unknown"
            key = f"rate_limit:ip:{client_ip}:{request.url.path}"

        allowed: bool = await redis.check_rate_limit(key, self.times, self.seconds)

        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Too many requests. Please wait {self.seconds} seconds.",
                headers={"Retry-After": str(self.seconds)},
            )


rate_limit_submit = UserRateLimiter(times=5, seconds=60)
rate_limit_status = UserRateLimiter(times=30, seconds=60)
rate_limit_image_generation = UserRateLimiter(times=10, seconds=60)
