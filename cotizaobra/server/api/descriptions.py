from fastapi import APIRouter, Depends, HTTPException, Request

from cotizaobra.server.schemas.quote import DescriptionIn, DescriptionOut
from cotizaobra.services.description_client import DescriptionClient
from cotizaobra.services.description_flow import DescriptionDraft, run_generation

router = APIRouter(prefix="/descriptions", tags=["descriptions"])


def get_description_client(request: Request) -> DescriptionClient:
    # skapas en gång i appens lifespan
    return request.app.state.description_client


@router.post("/generate", response_model=DescriptionOut, summary="AI-genererad projektbeskrivning")
async def post_generate(
    payload: DescriptionIn,
    client: DescriptionClient = Depends(get_description_client),
):
    draft = DescriptionDraft(prompt=payload.prompt, language=payload.language)

    # tom prompt -> inget anrop till tjänsten
    if not draft.can_generate:
        raise HTTPException(status_code=422, detail="Prompten är tom")

    done = await run_generation(draft, client)
    return DescriptionOut(
        text=done.text,
        ok=done.error is None,
        error=done.error,
        status=done.status,
    )
