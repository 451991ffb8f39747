# feria/repositories/design_repo.py
from sqlmodel import Session, select

from feria.models.design import BoothModel, Design, DesignFiles, Stand


class DesignRepository:
    """
    Data access layer for designs, their files and the stand/model catalogs.
    """

    # ----- Catalogs -----

    def list_stands(self, session: Session) -> list[Stand]:
        return list(session.exec(select(Stand)).all())

    def get_stand(self, session: Session, stand_id: str) -> Stand | None:
        return session.get(Stand, stand_id)

    def list_models(self, session: Session) -> list[BoothModel]:
        return list(session.exec(select(BoothModel)).all())

    def get_model(self, session: Session, model_id: str) -> BoothModel | None:
        return session.get(BoothModel, model_id)

    # ----- Designs -----

    def get_by_company(self, session: Session, company_id: str) -> Design | None:
        stmt = select(Design).where(Design.company_id == company_id)
        return session.exec(stmt).first()

    def list(self, session: Session) -> list[Design]:
        return list(session.exec(select(Design).order_by(Design.created_at)).all())

    def save(self, session: Session, design: Design) -> Design:
        session.add(design)
        session.commit()
        session.refresh(design)
        return design

    def delete(self, session: Session, design: Design) -> None:
        session.delete(design)
        session.commit()

    # ----- Design files -----

    def get_files(self, session: Session, files_id: str) -> DesignFiles | None:
        return session.get(DesignFiles, files_id)

    def get_files_by_company(self, session: Session, company_id: str) -> DesignFiles | None:
        stmt = select(DesignFiles).where(DesignFiles.company_id == company_id)
        return session.exec(stmt).first()

    def save_files(self, session: Session, files: DesignFiles) -> DesignFiles:
        session.add(files)
        session.commit()
        session.refresh(files)
        return files

    def delete_files(self, session: Session, files: DesignFiles) -> None:
        session.delete(files)
        session.commit()
