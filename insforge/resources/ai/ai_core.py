from collections import defaultdict

from insforge.models.ai import AIModel, ListModelsResponse, ModelProvider


class _AICore:
    ENDPOINT = "/api/ai"

    @staticmethod
    def _group_by_provider(models: list[AIModel]) -> list[ModelProvider]:
        grouped: dict[str, list[AIModel]] = defaultdict(list)
        for m in models:
            grouped[m.provider].append(m)
        # every model the backend lists is configured
        return [ModelProvider(provider=p, configured=True, models=ms) for p, ms in grouped.items()]

    def _parse_models(self, models: list[AIModel]) -> ListModelsResponse:
        text = [m for m in models if "text" in m.output_modality]
        image = [m for m in models if "image" in m.output_modality]
        return ListModelsResponse(text=self._group_by_provider(text), image=self._group_by_provider(image))
