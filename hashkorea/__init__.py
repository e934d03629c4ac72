"""Hash Korea 장소 추천 대화 서버."""
